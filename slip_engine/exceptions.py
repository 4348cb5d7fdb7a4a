"""
Custom exception hierarchy for the Outcome Slip Engine.

Provides structured error handling with clear error types and messages.
"""

from typing import Optional, Dict, Any


class EngineError(Exception):
    """Base exception for all engine-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details
        }


class SlipBuilderError(EngineError):
    """Base exception for slip builder errors."""
    pass


class PayloadValidationError(SlipBuilderError):
    """Raised when payload validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        kwargs.setdefault("error_code", "PAYLOAD_VALIDATION_ERROR")
        super().__init__(message, **kwargs)
        if field:
            self.details["field"] = field


class InvalidConfigError(PayloadValidationError):
    """Raised when a sampling configuration is outside its numeric domain."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, field=field, error_code="INVALID_CONFIG", **kwargs)


class ConfigurationError(EngineError):
    """Raised when configuration errors occur."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="CONFIGURATION_ERROR", **kwargs)
        if config_key:
            self.details["config_key"] = config_key
