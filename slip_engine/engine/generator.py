# engine/generator.py
"""
SLIP GENERATOR
- Three-way (1/X/2) and Over/Under 2.5 slips by weighted sampling with a
  run-length cap (bounded rejection + forced substitution)
- Correct-score coverage: every match x every score up to a goal bound,
  one single-leg slip each (deterministic, no sampling)
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

from ..config import MAX_SAMPLING_ATTEMPTS, RANDOM_SEED
from ..utils.id_handler import SlipIdFactory
from .sampling import RunState, sample_outcome
from .types import MarketType, Match, Outcome, SamplingConfig, Slip

logger = logging.getLogger("engine.generator")


@dataclass(frozen=True)
class GenerationStats:
    market: MarketType
    slips: int
    matches: int
    forced_substitutions: int
    duration_seconds: float


def score_grid(max_goals: int) -> List[str]:
    """All ``"h-a"`` scores with h + a <= max_goals, ordered by h then a."""
    return [
        f"{h}-{a}"
        for h in range(max_goals + 1)
        for a in range(max_goals + 1 - h)
    ]


class SlipGenerator:
    """
    Produces outcome slips for a fixed, ordered list of matches.

    The match list is frozen into a tuple when set, so one ``generate``
    call always works against the same fixtures. Apart from its random
    generator the instance holds no state between calls.
    """

    def __init__(
        self,
        matches: Iterable[Match] = (),
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        max_attempts: int = MAX_SAMPLING_ATTEMPTS,
    ):
        self.matches: Tuple[Match, ...] = tuple(matches)
        if rng is None:
            rng = np.random.default_rng(seed if seed is not None else RANDOM_SEED)
        self.rng = rng
        self.max_attempts = max_attempts

    def set_matches(self, matches: Iterable[Match]) -> None:
        self.matches = tuple(matches)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def generate(self, count: int, config: SamplingConfig) -> List[Slip]:
        slips, _ = self.generate_with_stats(count, config)
        return slips

    def generate_with_stats(
        self,
        count: int,
        config: SamplingConfig
    ) -> Tuple[List[Slip], GenerationStats]:
        """
        Generate ``count`` slips (or the full coverage set for correct-score).

        Raises:
            InvalidConfigError: If the config is outside its numeric domain
        """
        config.validate()
        matches = self.matches
        started = time.perf_counter()

        if config.market is MarketType.CORRECT_SCORE:
            # Correct score enumerates everything; count does not apply
            slips = self._correct_score_coverage(matches, config.max_goals)
            forced = 0
        else:
            slips, forced = self._sample_slips(matches, count, config)

        stats = GenerationStats(
            market=config.market,
            slips=len(slips),
            matches=len(matches),
            forced_substitutions=forced,
            duration_seconds=time.perf_counter() - started,
        )
        logger.info(
            f"[GENERATOR] Generated {stats.slips} slips | "
            f"Market: {config.market.value} | "
            f"Matches: {stats.matches} | "
            f"Forced substitutions: {forced} | "
            f"Duration: {stats.duration_seconds:.3f}s"
        )
        return slips, stats

    def build_slip(
        self,
        config: SamplingConfig,
        matches: Optional[Tuple[Match, ...]] = None,
        state: Optional[RunState] = None,
    ) -> Tuple[List[Outcome], RunState, int]:
        """
        Sample one outcome per match, in order.

        Returns:
            (outcomes, final run state, number of forced substitutions)
        """
        matches = self.matches if matches is None else matches
        state = RunState.initial() if state is None else state
        outcomes: List[Outcome] = []
        forced_count = 0

        for match in matches:
            code, forced = sample_outcome(
                config.market,
                config.distribution,
                state,
                config.max_consecutive,
                self.rng,
                max_attempts=self.max_attempts,
            )
            if forced:
                forced_count += 1
                logger.debug(
                    f"[GENERATOR] Forced '{code}' for {match.label} ({match.match_id}) "
                    f"after {self.max_attempts} rejected draws "
                    f"(run of {state.consecutive_count} x '{state.last_outcome}')"
                )
            state = state.advance(code)
            outcomes.append(Outcome(match_id=match.match_id, match=match, outcome=code))

        return outcomes, state, forced_count

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _sample_slips(
        self,
        matches: Tuple[Match, ...],
        count: int,
        config: SamplingConfig
    ) -> Tuple[List[Slip], int]:
        if count <= 0:
            return [], 0

        ids = SlipIdFactory("SLIP")
        slips: List[Slip] = []
        forced_total = 0
        for _ in range(count):
            outcomes, _, forced = self.build_slip(config, matches)
            forced_total += forced
            slips.append(Slip(slip_id=ids.next_id(), outcomes=outcomes))
        return slips, forced_total

    def _correct_score_coverage(
        self,
        matches: Tuple[Match, ...],
        max_goals: int
    ) -> List[Slip]:
        scores = score_grid(max_goals)
        ids = SlipIdFactory("CS")
        return [
            Slip(
                slip_id=ids.next_id(),
                outcomes=(Outcome(match_id=match.match_id, match=match, outcome=score),)
            )
            for match in matches
            for score in scores
        ]
