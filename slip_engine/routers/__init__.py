"""
API routers for the Outcome Slip Engine.

Separates endpoints into logical groups for better organization.
"""

from .slip_generation import router as slips_router
from .health import router as health_router

__all__ = [
    "slips_router",
    "health_router",
]
