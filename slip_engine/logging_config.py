"""
Logging configuration for the Outcome Slip Engine.

Sets up structured logging with file rotation and console output.
"""

import logging
from logging.handlers import RotatingFileHandler

from .config import (
    LOG_DIR,
    LOG_FILE,
    LOG_MAX_BYTES,
    LOG_BACKUP_COUNT,
    LOG_LEVEL
)


def safe_log(message: str) -> str:
    """Drop non-ASCII characters (team names, symbols) for Windows consoles."""
    return message.encode("ascii", "replace").decode("ascii")


def setup_logging() -> logging.Logger:
    """
    Configure logging for the application.

    Safe to call more than once; handlers are only attached the first time.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("engine_api")
    if logger.handlers:
        return logger

    # Ensure log directory exists
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    log_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] [%(name)s] %(message)s'
    )

    # Setup Rotating File Handler
    file_handler = RotatingFileHandler(
        LOG_FILE,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT
    )
    file_handler.setFormatter(log_formatter)
    file_handler.setLevel(logging.INFO)

    # Setup Console Handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(logging.INFO)

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    # Engine modules log under "engine.*"; route them to the same handlers
    engine_logger = logging.getLogger("engine")
    engine_logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    engine_logger.addHandler(file_handler)
    engine_logger.addHandler(console_handler)
    engine_logger.propagate = False

    # Prevent duplicate logs
    logger.propagate = False

    logger.info(safe_log("=" * 80))
    logger.info(safe_log("[START] Logging system initialized"))
    logger.info(safe_log(f"[CONFIG] Log Level: {LOG_LEVEL}"))
    logger.info(safe_log(f"[CONFIG] Log File: {LOG_FILE}"))
    logger.info(safe_log("=" * 80))

    return logger
