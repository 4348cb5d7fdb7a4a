"""
Outcome Slip Engine
Public Engine Interface

Stable, import-safe API surface exposed to FastAPI and the service layer.
Internal modules should be reached through these names.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from ..exceptions import (
    SlipBuilderError,
    PayloadValidationError,
    InvalidConfigError,
)
from .types import (
    MarketType,
    MARKET_OUTCOMES,
    HOME,
    DRAW,
    AWAY,
    OVER,
    UNDER,
    Match,
    Outcome,
    Distribution,
    SamplingConfig,
    Slip,
    Valuation,
)
from .sampling import RunState, sample_with_rejection, sample_outcome
from .generator import SlipGenerator, GenerationStats, score_grid
from .payout import BonusSchedule, PayoutCalculator

logger = logging.getLogger("engine")

# ---------------------------------------------------------------------
# Versioning
# ---------------------------------------------------------------------

__version__ = "1.0.0"

# ---------------------------------------------------------------------
# Engine lifecycle
# ---------------------------------------------------------------------

_ENGINE_INITIALIZED = False
_ENGINE_CONFIG: Dict[str, Any] = {
    "seed": None,
}


def initialize_engine(seed: Optional[int] = None) -> None:
    """
    Engine bootstrap hook.

    Args:
        seed: Default seed for generators created without an explicit one
    """
    global _ENGINE_INITIALIZED, _ENGINE_CONFIG

    if _ENGINE_INITIALIZED:
        logger.debug("[ENGINE INIT] Engine already initialized; skipping")
        return

    _ENGINE_CONFIG = {"seed": seed}
    _ENGINE_INITIALIZED = True

    logger.info(
        f"[ENGINE INIT] Outcome Slip Engine v{__version__} initialized | "
        f"Seed: {seed if seed is not None else 'random'}"
    )


def get_engine_status() -> Dict[str, Any]:
    schedule = BonusSchedule()
    return {
        "initialized": _ENGINE_INITIALIZED,
        "engine_type": "SlipGenerator",
        "version": __version__,
        "seed": _ENGINE_CONFIG.get("seed"),
        "markets": [m.value for m in MarketType],
        "bonus_max_legs": schedule.max_legs,
        "bonus_ceiling": schedule.ceiling,
        "features": [
            "Weighted 1X2 sampling with run-length cap",
            "Over/Under 2.5 sampling with run-length cap",
            "Correct-score coverage enumeration",
            "Accumulator bonus, tax and payout valuation",
        ],
    }


# ---------------------------------------------------------------------
# Primary public API
# ---------------------------------------------------------------------

def generate_slips(
    matches: Sequence[Match],
    count: int,
    config: SamplingConfig,
    stake: Any = 0,
    seed: Optional[int] = None,
) -> Tuple[List[Slip], GenerationStats]:
    """
    Generate and value one batch of slips.

    One call is one unit of work: callers that must keep an event loop
    responsive run it in a worker thread.

    Returns:
        (valued slips, generation stats)

    Raises:
        InvalidConfigError: If config or stake are outside their domain
    """
    if not _ENGINE_INITIALIZED:
        initialize_engine()

    if seed is None:
        seed = _ENGINE_CONFIG.get("seed")

    generator = SlipGenerator(matches, seed=seed)
    slips, stats = generator.generate_with_stats(count, config)
    PayoutCalculator().annotate(slips, stake)
    return slips, stats


__all__ = [
    "__version__",
    "initialize_engine",
    "get_engine_status",
    "generate_slips",
    "SlipBuilderError",
    "PayloadValidationError",
    "InvalidConfigError",
    "MarketType",
    "MARKET_OUTCOMES",
    "HOME",
    "DRAW",
    "AWAY",
    "OVER",
    "UNDER",
    "Match",
    "Outcome",
    "Distribution",
    "SamplingConfig",
    "Slip",
    "Valuation",
    "RunState",
    "sample_with_rejection",
    "sample_outcome",
    "SlipGenerator",
    "GenerationStats",
    "score_grid",
    "BonusSchedule",
    "PayoutCalculator",
]
