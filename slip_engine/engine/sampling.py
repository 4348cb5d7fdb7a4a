# engine/sampling.py
"""
Outcome sampling primitives.

All draws take an explicit numpy Generator so a slip can be reproduced
from a seed. Run state is an immutable value threaded through the
per-slip loop rather than mutable fields on the generator.
"""

from typing import Callable, NamedTuple, Optional, Sequence, Tuple, TypeVar

import numpy as np

from ..config import MAX_SAMPLING_ATTEMPTS
from .types import (
    AWAY,
    DRAW,
    HOME,
    MARKET_OUTCOMES,
    OVER,
    UNDER,
    Distribution,
    MarketType,
)

T = TypeVar("T")


class RunState(NamedTuple):
    """Run of identical codes ending at the previous match of the current slip."""
    last_outcome: Optional[str] = None
    consecutive_count: int = 0

    @classmethod
    def initial(cls) -> "RunState":
        return cls(None, 0)

    def blocks(self, code: str, max_consecutive: int) -> bool:
        return code == self.last_outcome and self.consecutive_count >= max_consecutive

    def advance(self, code: str) -> "RunState":
        if code == self.last_outcome:
            return RunState(code, self.consecutive_count + 1)
        return RunState(code, 1)


def weighted_three_way(distribution: Distribution, rng: np.random.Generator) -> str:
    total = distribution.home + distribution.draw + distribution.away
    if total <= 0:
        # All-zero weights: uniform thirds
        return (HOME, DRAW, AWAY)[int(rng.integers(3))]

    rand = rng.random() * total
    if rand < distribution.home:
        return HOME
    if rand < distribution.home + distribution.draw:
        return DRAW
    return AWAY


def weighted_goals(distribution: Distribution, rng: np.random.Generator) -> str:
    total = distribution.over + distribution.under
    if total <= 0:
        return (OVER, UNDER)[int(rng.integers(2))]

    rand = rng.random() * total
    if rand < distribution.over:
        return OVER
    return UNDER


WEIGHTED_DRAWS: dict = {
    MarketType.THREE_WAY: weighted_three_way,
    MarketType.GOALS: weighted_goals,
}


def force_different(avoid: Optional[str], options: Sequence[str], rng: np.random.Generator) -> str:
    """Uniform pick among ``options`` other than ``avoid``."""
    candidates = [o for o in options if o != avoid]
    if not candidates:
        raise ValueError(f"No outcome other than {avoid!r} available in {list(options)}")
    return candidates[int(rng.integers(len(candidates)))]


def sample_with_rejection(
    draw: Callable[[], T],
    accept: Callable[[T], bool],
    fallback: Callable[[], T],
    max_attempts: int = MAX_SAMPLING_ATTEMPTS,
) -> Tuple[T, bool]:
    """
    Bounded rejection sampling with an escape hatch.

    Draws up to ``max_attempts`` candidates and returns the first one
    ``accept`` allows. When every attempt is rejected, ``fallback()`` is
    returned instead.

    Returns:
        (value, forced) where ``forced`` is True when the fallback was used
    """
    for _ in range(max_attempts):
        candidate = draw()
        if accept(candidate):
            return candidate, False
    return fallback(), True


def sample_outcome(
    market: MarketType,
    distribution: Distribution,
    state: RunState,
    max_consecutive: int,
    rng: np.random.Generator,
    max_attempts: int = MAX_SAMPLING_ATTEMPTS,
) -> Tuple[str, bool]:
    """Draw one match outcome for ``market`` that respects the run-length cap."""
    weighted = WEIGHTED_DRAWS[market]
    return sample_with_rejection(
        draw=lambda: weighted(distribution, rng),
        accept=lambda code: not state.blocks(code, max_consecutive),
        fallback=lambda: force_different(state.last_outcome, MARKET_OUTCOMES[market], rng),
        max_attempts=max_attempts,
    )
