import re
from collections import Counter

import numpy as np
import pytest

from conftest import make_matches
from slip_engine.engine import (
    Distribution,
    InvalidConfigError,
    MarketType,
    SamplingConfig,
    SlipGenerator,
    score_grid,
)
from slip_engine.engine.types import AWAY, DRAW, HOME, OVER, UNDER


def longest_run(codes):
    best = run = 0
    prev = object()
    for code in codes:
        run = run + 1 if code == prev else 1
        prev = code
        best = max(best, run)
    return best


@pytest.mark.parametrize("k", [1, 2, 3, 5])
def test_three_way_run_length_never_exceeds_cap(k):
    rng = np.random.default_rng(100 + k)
    for n_matches in (1, 4, 9, 17, 30):
        gen = SlipGenerator(make_matches(n_matches), rng=rng)
        config = SamplingConfig(
            market=MarketType.THREE_WAY,
            distribution=Distribution(home=60, draw=25, away=15),
            max_consecutive=k,
        )
        for slip in gen.generate(40, config):
            assert longest_run(slip.codes()) <= k


@pytest.mark.parametrize("k", [1, 2, 3, 5])
def test_goals_run_length_never_exceeds_cap(k):
    rng = np.random.default_rng(200 + k)
    gen = SlipGenerator(make_matches(25), rng=rng)
    config = SamplingConfig(
        market=MarketType.GOALS,
        distribution=Distribution(over=90, under=10),
        max_consecutive=k,
    )
    for slip in gen.generate(40, config):
        assert set(slip.codes()) <= {OVER, UNDER}
        assert longest_run(slip.codes()) <= k


def test_slips_follow_input_match_order(matches):
    gen = SlipGenerator(matches, seed=1)
    slips = gen.generate(10, SamplingConfig())
    assert len(slips) == 10
    for slip in slips:
        assert [o.match_id for o in slip.outcomes] == [m.match_id for m in matches]
        # outcomes reference the caller's match objects
        assert all(o.match is m for o, m in zip(slip.outcomes, matches))
        assert set(slip.codes()) <= {HOME, DRAW, AWAY}


def test_slip_ids_are_unique_within_batch(matches):
    slips = SlipGenerator(matches, seed=2).generate(500, SamplingConfig())
    ids = [s.slip_id for s in slips]
    assert len(set(ids)) == len(ids)
    assert all(re.match(r"^SLIP-\d+-\d+$", i) for i in ids)


def test_zero_or_negative_count_gives_no_slips(matches):
    gen = SlipGenerator(matches, seed=3)
    assert gen.generate(0, SamplingConfig()) == []
    assert gen.generate(-5, SamplingConfig()) == []


def test_no_matches_gives_empty_slips():
    slips = SlipGenerator([], seed=4).generate(3, SamplingConfig())
    assert len(slips) == 3
    assert all(slip.legs == 0 for slip in slips)


def test_same_seed_reproduces_batch(matches):
    config = SamplingConfig(distribution=Distribution(home=40, draw=30, away=30))
    a = SlipGenerator(matches, seed=42).generate(20, config)
    b = SlipGenerator(matches, seed=42).generate(20, config)
    assert [s.codes() for s in a] == [s.codes() for s in b]


def test_distribution_bias_matches_weights():
    gen = SlipGenerator(make_matches(100), seed=2024)
    config = SamplingConfig(
        distribution=Distribution(home=70, draw=20, away=10),
        max_consecutive=10 ** 6,
    )
    slips = gen.generate(1000, config)
    counts = Counter(code for slip in slips for code in slip.codes())
    total = sum(counts.values())
    assert total == 100000
    assert abs(counts[HOME] / total - 0.70) < 0.02
    assert abs(counts[DRAW] / total - 0.20) < 0.02
    assert abs(counts[AWAY] / total - 0.10) < 0.02


def test_degenerate_distribution_alternates_and_terminates():
    gen = SlipGenerator(make_matches(21), seed=9)
    config = SamplingConfig(
        distribution=Distribution(home=100, draw=0, away=0),
        max_consecutive=1,
    )
    slips, stats = gen.generate_with_stats(50, config)
    for slip in slips:
        codes = slip.codes()
        assert codes[0::2] == [HOME] * 11
        assert all(code in (DRAW, AWAY) for code in codes[1::2])
    # every second match needs a forced substitution
    assert stats.forced_substitutions == 50 * 10


def test_build_slip_threads_run_state(matches):
    gen = SlipGenerator(matches, seed=11)
    config = SamplingConfig(distribution=Distribution(home=1, draw=0, away=0), max_consecutive=6)
    outcomes, state, forced = gen.build_slip(config)
    assert [o.outcome for o in outcomes] == [HOME] * 6
    assert state.last_outcome == HOME
    assert state.consecutive_count == 6
    assert forced == 0


def test_set_matches_freezes_list():
    source = make_matches(3)
    gen = SlipGenerator(seed=5)
    gen.set_matches(source)
    source.append(make_matches(4)[3])
    assert len(gen.matches) == 3
    assert all(slip.legs == 3 for slip in gen.generate(5, SamplingConfig()))


def test_score_grid_small_bound():
    assert score_grid(2) == ["0-0", "0-1", "0-2", "1-0", "1-1", "2-0"]
    assert score_grid(0) == ["0-0"]


@pytest.mark.parametrize("m", [0, 1, 2, 3, 5, 8])
def test_score_grid_size(m):
    assert len(score_grid(m)) == sum(m - h + 1 for h in range(m + 1))


def test_correct_score_coverage_is_full_product():
    matches = make_matches(3)
    config = SamplingConfig(market=MarketType.CORRECT_SCORE, max_goals=2)
    slips = SlipGenerator(matches, seed=1).generate(999, config)
    assert len(slips) == 18
    assert all(slip.legs == 1 for slip in slips)
    pairs = [(s.outcomes[0].match_id, s.outcomes[0].outcome) for s in slips]
    expected = [(m.match_id, score) for m in matches for score in score_grid(2)]
    assert pairs == expected
    assert all(s.slip_id.startswith("CS-") for s in slips)
    assert len({s.slip_id for s in slips}) == 18


def test_correct_score_default_bound():
    slips = SlipGenerator(make_matches(2), seed=1).generate(
        0, SamplingConfig(market=MarketType.CORRECT_SCORE)
    )
    assert len(slips) == 2 * 21


def test_correct_score_without_matches():
    config = SamplingConfig(market=MarketType.CORRECT_SCORE, max_goals=3)
    assert SlipGenerator([], seed=1).generate(10, config) == []


@pytest.mark.parametrize("config", [
    SamplingConfig(distribution=Distribution(home=-1)),
    SamplingConfig(distribution=Distribution(under=-0.5)),
    SamplingConfig(distribution=Distribution(draw=float("nan"))),
    SamplingConfig(distribution=Distribution(home=float("inf"))),
    SamplingConfig(max_consecutive=0),
    SamplingConfig(max_goals=-1),
    SamplingConfig(max_consecutive=2.5),
])
def test_invalid_config_rejected_before_generation(matches, config):
    with pytest.raises(InvalidConfigError):
        SlipGenerator(matches, seed=1).generate(5, config)


def test_market_parse():
    assert MarketType.parse("1x2") is MarketType.THREE_WAY
    assert MarketType.parse("GOALS") is MarketType.GOALS
    assert MarketType.parse("correct_score") is MarketType.CORRECT_SCORE
    assert MarketType.parse(MarketType.GOALS) is MarketType.GOALS
    with pytest.raises(InvalidConfigError):
        MarketType.parse("asian_handicap")
