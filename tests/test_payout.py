from decimal import Decimal

import pytest

from conftest import make_matches
from slip_engine.config import BONUS_TABLE
from slip_engine.engine import (
    BonusSchedule,
    Match,
    Outcome,
    PayoutCalculator,
    SamplingConfig,
    Slip,
    SlipBuilderError,
    SlipGenerator,
    generate_slips,
)
from slip_engine.exceptions import ConfigurationError, InvalidConfigError


def slip_of(matches, codes, slip_id="S-1"):
    return Slip(
        slip_id=slip_id,
        outcomes=[Outcome(match_id=m.match_id, match=m, outcome=c) for m, c in zip(matches, codes)],
    )


def test_bonus_below_table_floor_is_zero():
    schedule = BonusSchedule()
    assert schedule.percent_for(0) == 0
    assert schedule.percent_for(1) == 0
    assert schedule.percent_for(2) == 0


def test_bonus_table_endpoints():
    schedule = BonusSchedule()
    assert schedule.percent_for(3) == 3
    assert schedule.percent_for(4) == 5
    assert schedule.percent_for(28) == 200
    assert schedule.percent_for(29) == 215
    assert schedule.percent_for(39) == 450
    assert schedule.percent_for(40) == 500


def test_bonus_is_monotonic_and_capped():
    schedule = BonusSchedule()
    for legs in range(3, 40):
        assert schedule.percent_for(legs + 1) >= schedule.percent_for(legs)
    assert schedule.percent_for(41) == 1000
    assert schedule.percent_for(200) == 1000


def test_bonus_table_fully_enumerated():
    assert sorted(BONUS_TABLE) == list(range(3, 41))


def test_bonus_schedule_rejects_decreasing_table():
    with pytest.raises(ConfigurationError):
        BonusSchedule({3: 5, 4: 4})


def test_bonus_schedule_rejects_low_ceiling():
    with pytest.raises(ConfigurationError):
        BonusSchedule({3: 5, 4: 10}, ceiling=8)


def test_custom_bonus_schedule():
    schedule = BonusSchedule({2: 10, 3: 20}, ceiling=50)
    assert schedule.percent_for(1) == 0
    assert schedule.percent_for(3) == 20
    assert schedule.percent_for(4) == 50


def test_bonus_schedule_rejects_table_with_gaps():
    with pytest.raises(ConfigurationError):
        BonusSchedule({3: 5, 5: 10})


@pytest.mark.parametrize("odds", [float("nan"), float("inf"), 0, -1.5])
def test_match_rejects_non_positive_or_non_finite_odds(odds):
    with pytest.raises(InvalidConfigError):
        Match("m-0", "A", "B", odds={"1": odds})


@pytest.mark.parametrize("stake", ["NaN", "Infinity", -1])
def test_valuate_rejects_bad_stake(stake):
    match = Match("m-0", "A", "B", odds={"1": 2.0})
    with pytest.raises(InvalidConfigError):
        PayoutCalculator().valuate(slip_of([match], ["1"]), stake)


def test_single_leg_payout_example():
    match = Match("m-0", "A", "B", odds={"1": 2.0})
    v = PayoutCalculator().valuate(slip_of([match], ["1"]), 1000)
    assert v.total_odds == Decimal("2")
    assert v.legs == 1
    assert v.bonus_percent == 0
    assert v.gross_profit == Decimal("1000")
    assert v.win_bonus == 0
    assert v.tax == Decimal("120")
    assert v.payout == Decimal("1880")


def test_three_leg_bonus_example():
    matches = make_matches(3, odds={"1": 2.0, "X": 3.0, "2": 4.0})
    v = PayoutCalculator().valuate(slip_of(matches, ["1", "1", "1"]), 1000)
    assert v.total_odds == Decimal("8")
    assert v.gross_profit == Decimal("7000")
    assert v.bonus_percent == 3
    assert v.win_bonus == Decimal("210")
    assert v.gross_winnings == Decimal("7210")
    assert v.tax == Decimal("865.2")
    assert v.payout == Decimal("7344.8")


def test_missing_odds_default_to_one():
    match = Match("m-0", "A", "B", odds={"1": 2.5})
    v = PayoutCalculator().valuate(slip_of([match], ["X"]), 100)
    assert v.total_odds == Decimal("1")
    assert v.gross_profit == 0
    assert v.tax == 0
    assert v.payout == Decimal("100")


def test_empty_slip_valuation():
    v = PayoutCalculator().valuate(Slip("S-0", []), 500)
    assert v.total_odds == Decimal("1")
    assert v.legs == 0
    assert v.payout == Decimal("500")


def test_zero_stake():
    matches = make_matches(5)
    v = PayoutCalculator().valuate(slip_of(matches, ["2"] * 5), 0)
    assert v.payout == 0
    assert v.tax == 0


def test_sub_one_odds_never_add_bonus_or_tax():
    matches = [Match(f"m-{i}", "A", "B", odds={"1": 0.5}) for i in range(3)]
    v = PayoutCalculator().valuate(slip_of(matches, ["1"] * 3), 800)
    assert v.gross_profit == Decimal("-700")
    assert v.win_bonus == 0
    assert v.tax == 0
    assert v.payout == Decimal("100")
    assert v.payout >= 0


def test_bonus_ceiling_applies_past_table():
    matches = make_matches(45, odds={"1": 1.1})
    v = PayoutCalculator().valuate(slip_of(matches, ["1"] * 45), 10)
    assert v.bonus_percent == 1000
    assert v.win_bonus == v.gross_profit * 10


def test_no_internal_rounding():
    matches = make_matches(2, odds={"1": 1.37, "X": 1.0, "2": 1.0})
    v = PayoutCalculator().valuate(slip_of(matches, ["1", "1"]), 3)
    assert v.total_odds == Decimal("1.8769")
    assert v.gross_profit == Decimal("2.6307")
    assert v.tax == Decimal("2.6307") * Decimal("0.12")


def test_negative_stake_rejected():
    with pytest.raises(InvalidConfigError):
        PayoutCalculator().valuate(Slip("S-0", []), -1)


def test_valuate_is_idempotent_and_pure():
    matches = make_matches(4)
    slip = slip_of(matches, ["1", "X", "2", "1"])
    calc = PayoutCalculator()
    first = calc.valuate(slip, 250)
    second = calc.valuate(slip, 250)
    assert first == second
    assert slip.valuation is None


def test_annotate_attaches_valuation_to_batch():
    matches = make_matches(4)
    slips = SlipGenerator(matches, seed=3).generate(10, SamplingConfig())
    calc = PayoutCalculator()
    valued = calc.annotate(slips, 1000)
    assert valued is not None and len(valued) == 10
    for slip in valued:
        assert slip.valuation == calc.valuate(slip, 1000)
        assert slip.valuation.stake == Decimal("1000")
        assert slip.valuation.legs == 4
        data = slip.to_dict()
        assert len(data["outcomes"]) == 4
        assert data["legs"] == 4
        assert data["payout"] == float(slip.valuation.payout)


def test_annotate_twice_same_stake_is_allowed():
    slips = SlipGenerator(make_matches(2), seed=3).generate(2, SamplingConfig())
    calc = PayoutCalculator()
    calc.annotate(slips, 10)
    calc.annotate(slips, 10)


def test_revaluing_with_different_stake_is_rejected():
    slip = SlipGenerator(make_matches(2), seed=3).generate(1, SamplingConfig())[0]
    calc = PayoutCalculator()
    calc.annotate([slip], 10)
    with pytest.raises(SlipBuilderError):
        calc.annotate([slip], 20)


def test_generate_slips_values_every_slip():
    slips, stats = generate_slips(make_matches(3), 7, SamplingConfig(), stake=100, seed=1)
    assert stats.slips == 7
    assert all(s.valuation is not None for s in slips)
    assert all(s.valuation.payout >= 0 for s in slips)


def test_match_rejects_non_positive_odds():
    with pytest.raises(InvalidConfigError):
        Match("m-0", "A", "B", odds={"1": 0})
