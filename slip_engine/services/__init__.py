"""
Service layer for business logic separation.

Services handle core business logic, keeping API endpoints clean and focused.
"""

from .slip_service import SlipService, suggested_slip_count
from .validation_service import ValidationService

__all__ = [
    "SlipService",
    "ValidationService",
    "suggested_slip_count",
]
