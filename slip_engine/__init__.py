# slip_engine/__init__.py

"""
Outcome Slip Engine - Main Package Exports

The FastAPI app lives in ``slip_engine.app`` and is not imported here, so
the engine can be used without starting logging handlers or a server.
"""

from .engine import (
    generate_slips,
    SlipGenerator,
    PayoutCalculator,
    BonusSchedule,
    SamplingConfig,
    Distribution,
    MarketType,
    Match,
    Outcome,
    Slip,
    Valuation,
    __version__ as ENGINE_VERSION,
)
from .exceptions import (
    EngineError,
    SlipBuilderError,
    PayloadValidationError,
    InvalidConfigError,
    ConfigurationError,
)

# Package metadata
__version__ = "1.0.0"
__description__ = "Randomized outcome slip generation with accumulator payout valuation"

__all__ = [
    'generate_slips',
    'SlipGenerator',
    'PayoutCalculator',
    'BonusSchedule',
    'SamplingConfig',
    'Distribution',
    'MarketType',
    'Match',
    'Outcome',
    'Slip',
    'Valuation',

    # Exceptions
    'EngineError',
    'SlipBuilderError',
    'PayloadValidationError',
    'InvalidConfigError',
    'ConfigurationError',

    # Metadata
    '__version__',
    '__description__',
    'ENGINE_VERSION',
]
