"""
Configuration management for the Outcome Slip Engine.

Centralizes all configuration settings, environment variables, and constants.
"""

import os
from typing import Dict, Any, Optional
from pathlib import Path

# Base directory
BASE_DIR = Path(__file__).parent

# Logging Configuration
LOG_DIR = Path(os.getenv("LOG_DIR", str(BASE_DIR / "logs")))
LOG_FILE = LOG_DIR / "engine.log"
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 10
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Engine Configuration
ENGINE_VERSION = "1.0.0"

# API Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "5000"))
API_TITLE = "Outcome Slip Engine API"
API_DESCRIPTION = (
    "Randomized outcome slip generation (1X2, Over/Under 2.5, correct-score coverage) "
    "with accumulator bonus, tax and payout valuation."
)

# Generation Configuration
MAX_SLIP_COUNT = int(os.getenv("MAX_SLIP_COUNT", "100000"))
MAX_MATCHES = int(os.getenv("MAX_MATCHES", "60"))
MAX_SAMPLING_ATTEMPTS = int(os.getenv("MAX_SAMPLING_ATTEMPTS", "20"))
DEFAULT_SLIP_COUNT = 5
DEFAULT_MAX_CONSECUTIVE = int(os.getenv("DEFAULT_MAX_CONSECUTIVE", "3"))
DEFAULT_MAX_GOALS = int(os.getenv("DEFAULT_MAX_GOALS", "5"))
DEFAULT_ODDS = 1.0

_seed = os.getenv("RANDOM_SEED")
RANDOM_SEED: Optional[int] = int(_seed) if _seed not in (None, "") else None

# Payout Configuration
MIN_STAKE = float(os.getenv("MIN_STAKE", "0.0"))
MAX_STAKE = float(os.getenv("MAX_STAKE", "100000000.0"))
TAX_RATE = os.getenv("TAX_RATE", "0.12")
CURRENCY = os.getenv("CURRENCY", "TSH")

# Accumulator bonus schedule: legs -> bonus percent on gross profit.
# Below the first key no bonus applies; above the last key BONUS_CEILING applies.
BONUS_TABLE: Dict[int, int] = {
    3: 3, 4: 5, 5: 10, 6: 15, 7: 20, 8: 25, 9: 30, 10: 35,
    11: 40, 12: 45, 13: 50, 14: 60, 15: 70, 16: 80, 17: 90, 18: 100,
    19: 110, 20: 120, 21: 130, 22: 140, 23: 150, 24: 160, 25: 170,
    26: 180, 27: 190, 28: 200, 29: 215, 30: 230, 31: 245, 32: 260,
    33: 280, 34: 300, 35: 325, 36: 350, 37: 375, 38: 400, 39: 450, 40: 500,
}
BONUS_CEILING = 1000

# Error Messages
ERROR_MESSAGES = {
    "INVALID_CONFIG": "Invalid sampling configuration",
    "INVALID_PAYLOAD": "Invalid payload structure",
    "GENERATION_FAILED": "Slip generation failed",
    "VALUATION_FAILED": "Slip valuation failed",
}


def get_config() -> Dict[str, Any]:
    """Get complete configuration dictionary."""
    return {
        "engine": {
            "version": ENGINE_VERSION,
            "max_sampling_attempts": MAX_SAMPLING_ATTEMPTS,
            "random_seed": RANDOM_SEED,
        },
        "api": {
            "host": API_HOST,
            "port": API_PORT,
            "title": API_TITLE,
        },
        "logging": {
            "log_dir": str(LOG_DIR),
            "log_file": str(LOG_FILE),
            "log_level": LOG_LEVEL,
        },
        "generation": {
            "max_slip_count": MAX_SLIP_COUNT,
            "max_matches": MAX_MATCHES,
            "default_slip_count": DEFAULT_SLIP_COUNT,
            "default_max_consecutive": DEFAULT_MAX_CONSECUTIVE,
            "default_max_goals": DEFAULT_MAX_GOALS,
        },
        "payout": {
            "min_stake": MIN_STAKE,
            "max_stake": MAX_STAKE,
            "tax_rate": TAX_RATE,
            "currency": CURRENCY,
            "bonus_ceiling": BONUS_CEILING,
            "bonus_max_legs": max(BONUS_TABLE),
        },
    }


def validate_config() -> bool:
    """Validate configuration values."""
    errors = []

    if MAX_SLIP_COUNT < 1:
        errors.append("MAX_SLIP_COUNT must be at least 1")

    if MAX_SAMPLING_ATTEMPTS < 1:
        errors.append("MAX_SAMPLING_ATTEMPTS must be at least 1")

    if DEFAULT_MAX_CONSECUTIVE < 1:
        errors.append("DEFAULT_MAX_CONSECUTIVE must be at least 1")

    if DEFAULT_MAX_GOALS < 0:
        errors.append("DEFAULT_MAX_GOALS cannot be negative")

    if API_PORT < 1 or API_PORT > 65535:
        errors.append("API_PORT must be between 1 and 65535")

    if MIN_STAKE < 0:
        errors.append("MIN_STAKE cannot be negative")

    if MAX_STAKE <= MIN_STAKE:
        errors.append("MAX_STAKE must be greater than MIN_STAKE")

    try:
        if not 0 <= float(TAX_RATE) < 1:
            errors.append("TAX_RATE must be in [0, 1)")
    except ValueError:
        errors.append(f"TAX_RATE is not a number: {TAX_RATE!r}")

    if errors:
        raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    return True
