"""
Outcome Slip Engine API - Main Application

Generates randomized outcome slips for a list of matches and values
each slip (combined odds, accumulator bonus, tax, payout).

Architecture:
- Match-list parsing and rendering live in the client
- This service receives structured matches + sampling config
- Returns generated slips with their financial breakdown
"""

import uvicorn
import logging
from fastapi import FastAPI
from fastapi.responses import JSONResponse

# Configure logging FIRST (before other imports)
from .logging_config import setup_logging, safe_log
from .config import (
    ENGINE_VERSION,
    API_TITLE,
    API_DESCRIPTION,
    API_HOST,
    API_PORT,
    RANDOM_SEED,
    validate_config
)

logger = setup_logging()

logger.info(safe_log("=" * 80))
logger.info(safe_log(f"[START] Outcome Slip Engine v{ENGINE_VERSION} Initializing..."))
logger.info(safe_log("[START] Markets: 1X2 + Over/Under 2.5 + Correct Score Coverage"))
logger.info(safe_log("=" * 80))

# Validate configuration
try:
    validate_config()
    logger.info(safe_log("[OK] Configuration validated"))
except ValueError as e:
    logger.error(safe_log(f"[ERROR] Configuration validation failed: {e}"))
    raise

from .engine import initialize_engine, get_engine_status
from .exceptions import (
    SlipBuilderError,
    PayloadValidationError,
)

logger.info(safe_log("[PROCESS] Initializing slip generator..."))
initialize_engine(seed=RANDOM_SEED)
engine_status = get_engine_status()
logger.info(safe_log(f"[CONFIG] Engine Type: {engine_status.get('engine_type', 'Unknown')}"))
logger.info(safe_log(f"[CONFIG] Markets: {', '.join(engine_status.get('markets', []))}"))
for feature in engine_status.get("features", []):
    logger.info(safe_log(f"[FEAT]   - {feature}"))

# Create FastAPI app
app = FastAPI(
    title=API_TITLE,
    version=ENGINE_VERSION,
    description=API_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc"
)

logger.info(safe_log("[OK] FastAPI application created"))

from .routers import slips_router, health_router

app.include_router(slips_router)
app.include_router(health_router)

from .middleware import RequestLoggingMiddleware
app.add_middleware(RequestLoggingMiddleware)


# Exception handlers
@app.exception_handler(PayloadValidationError)
async def payload_validation_handler(request, exc: PayloadValidationError):
    """Handle payload validation errors (InvalidConfig included)."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(safe_log(f"[{request_id}] PayloadValidationError: {exc.message}"))

    return JSONResponse(
        status_code=400,
        content={
            **exc.to_dict(),
            "status_code": 400,
            "request_id": request_id
        }
    )


@app.exception_handler(SlipBuilderError)
async def slip_builder_handler(request, exc: SlipBuilderError):
    """Handle slip builder errors."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(safe_log(f"[{request_id}] SlipBuilderError: {exc.message}"))

    return JSONResponse(
        status_code=422,
        content={
            **exc.to_dict(),
            "status_code": 422,
            "request_id": request_id
        }
    )


@app.get("/")
async def root():
    """Service information endpoint."""
    return {
        "service": API_TITLE,
        "version": ENGINE_VERSION,
        "status": "operational",
        "description": API_DESCRIPTION,
        "markets": get_engine_status().get("markets", []),
        "documentation": "/docs",
        "health_check": "/health",
        "engine_info": "/engine-info",
        "markets_info": "/api/v1/markets"
    }


@app.on_event("startup")
async def startup_event():
    """Log application startup."""
    logger.info(safe_log("=" * 80))
    logger.info(safe_log("[START] Application startup complete"))
    logger.info(safe_log(f"[START] Engine Version: {ENGINE_VERSION}"))
    logger.info(safe_log("[START] Ready to accept requests"))
    logger.info(safe_log("=" * 80))


@app.on_event("shutdown")
async def shutdown_event():
    """Log application shutdown."""
    logger.info(safe_log("[SHUTDOWN] Application shutting down"))


def main():
    logger.info(safe_log("[START] Starting uvicorn server..."))
    uvicorn.run(
        app,
        host=API_HOST,
        port=API_PORT,
        log_level="info"
    )


if __name__ == "__main__":
    main()
