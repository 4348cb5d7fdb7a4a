"""
Slip Generation Endpoints

Handles all slip generation related endpoints:
- POST /generate-slips - Generate and value outcome slips
- POST /valuate - Value a single caller-built slip
- GET /markets - List supported markets
- GET /bonus-schedule - Accumulator bonus table
- GET /suggested-count - Suggested slip count for n matches
"""

import logging
import time
from fastapi import APIRouter, HTTPException, Query, Request
from starlette.concurrency import run_in_threadpool

from ..schemas import (
    GenerateSlipsRequest,
    EngineResponse,
    ValuationRequest,
    ValuationResponse,
)
from ..services import SlipService, suggested_slip_count
from ..exceptions import (
    SlipBuilderError,
    PayloadValidationError,
)
from ..config import MAX_SLIP_COUNT, MAX_MATCHES

logger = logging.getLogger("engine_api.routers")
router = APIRouter(prefix="/api/v1", tags=["slips"])

# Initialize services
slip_service = SlipService()


@router.post("/generate-slips", response_model=EngineResponse)
async def generate_slips(payload: GenerateSlipsRequest, request: Request):
    """
    Generate outcome slips for the given matches and value each one.

    Large batches run in the threadpool so the event loop stays free.
    """
    request_id = getattr(request.state, "request_id", f"gen_{int(time.time() * 1000)}")

    logger.info(f"[{request_id}] ========== SLIP GENERATION STARTED ==========")

    try:
        result = await run_in_threadpool(slip_service.generate, payload, request_id)

    except PayloadValidationError as e:
        logger.error(f"[{request_id}] [ERROR] Validation failed: {e.message}")
        raise HTTPException(status_code=400, detail={**e.to_dict(), "request_id": request_id})

    except SlipBuilderError as e:
        logger.error(f"[{request_id}] [ERROR] Slip builder error: {e.message}")
        raise HTTPException(
            status_code=422,
            detail={**e.to_dict(), "request_id": request_id}
        )

    generated = result["generated_slips"]
    metadata = result["metadata"]

    logger.info(f"[{request_id}] ========== SLIP GENERATION COMPLETE ==========")

    return {
        "generated_slips": generated,
        "metadata": {
            **metadata,
            "request_id": request_id
        },
        "status": "success",
        "generated_at": metadata.get("generated_at"),
        "total_slips": len(generated)
    }


@router.post("/valuate", response_model=ValuationResponse)
async def valuate_slip(payload: ValuationRequest, request: Request):
    """Combined odds, bonus, tax and payout for one slip."""
    request_id = getattr(request.state, "request_id", "unknown")
    try:
        return slip_service.valuate_legs(
            [leg.model_dump() for leg in payload.legs],
            payload.stake
        )
    except PayloadValidationError as e:
        logger.error(f"[{request_id}] [ERROR] Valuation rejected: {e.message}")
        raise HTTPException(status_code=400, detail={**e.to_dict(), "request_id": request_id})


@router.get("/markets")
async def list_markets():
    markets = slip_service.get_market_info()
    logger.info(f"[MARKETS] Market info requested - {len(markets)} markets")
    return {
        "status": "success",
        "markets": markets,
        "default_market": "1x2",
    }


@router.get("/bonus-schedule")
async def bonus_schedule():
    return {
        "status": "success",
        "bonus_schedule": slip_service.get_bonus_schedule(),
    }


@router.get("/suggested-count")
async def suggested_count(matches: int = Query(..., ge=0, le=MAX_MATCHES)):
    suggested = suggested_slip_count(matches)
    return {
        "matches": matches,
        "suggested_slip_count": suggested,
        "capped": matches > 0 and 3 ** matches > MAX_SLIP_COUNT,
        "max_slip_count": MAX_SLIP_COUNT,
    }
