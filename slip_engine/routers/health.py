"""
Health Check and System Information Endpoints

Provides health checks, system status, and engine information.
"""

import logging
import os
from datetime import datetime, timezone
from fastapi import APIRouter

from ..config import (
    ENGINE_VERSION,
    LOG_DIR,
    MAX_SLIP_COUNT,
    MAX_SAMPLING_ATTEMPTS,
)
from ..engine import get_engine_status

logger = logging.getLogger("engine_api.routers")
router = APIRouter(tags=["health"])


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        - Service status
        - Engine availability
        - System information
    """
    engine_status = get_engine_status()
    engine_available = engine_status.get("initialized", False)

    log_dir_status = "exists" if os.path.exists(LOG_DIR) else "missing"

    health_response = {
        "status": "operational" if engine_available else "degraded",
        "service": "outcome-slip-engine",
        "engine_version": ENGINE_VERSION,
        "engine_available": engine_available,
        "engine_status": "healthy" if engine_available else "uninitialized",
        "engine_details": engine_status,
        "log_dir": log_dir_status,
        "timestamp": _utc_now(),
        "endpoints": {
            "/api/v1/generate-slips": "POST - Generate and value outcome slips",
            "/api/v1/valuate": "POST - Value a single slip",
            "/api/v1/markets": "GET - List supported markets",
            "/api/v1/bonus-schedule": "GET - Accumulator bonus table",
            "/api/v1/suggested-count": "GET - Suggested slip count for n matches",
            "/health": "GET - Health check",
            "/engine-info": "GET - Detailed engine information",
            "/docs": "GET - Interactive API documentation"
        }
    }

    logger.info(f"[HEALTH] Health check requested - Status: {health_response['status']}")

    return health_response


@router.get("/engine-info")
async def engine_info():
    """Detailed engine information: capabilities and limits."""
    engine_status = get_engine_status()

    logger.info("[ENGINE INFO] Engine info requested")

    return {
        "name": "Outcome Slip Engine",
        "version": ENGINE_VERSION,
        "description": (
            "Weighted outcome sampling with run-length caps, correct-score "
            "coverage and accumulator payout valuation"
        ),
        "features": engine_status.get("features", []),
        "capabilities": {
            "markets": engine_status.get("markets", []),
            "max_slip_count": MAX_SLIP_COUNT,
            "max_sampling_attempts": MAX_SAMPLING_ATTEMPTS,
            "bonus_max_legs": engine_status.get("bonus_max_legs"),
            "bonus_ceiling": engine_status.get("bonus_ceiling"),
            "initialized": engine_status.get("initialized", False),
        },
    }
