"""
Slip Generation Service

Handles the business logic around the engine:
- Turning request payloads into Match / SamplingConfig objects
- Running generation and valuation
- Building response rows and metadata
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config import (
    DEFAULT_MAX_CONSECUTIVE,
    DEFAULT_MAX_GOALS,
    DEFAULT_ODDS,
    MAX_SLIP_COUNT,
    CURRENCY,
)
from ..engine import (
    MARKET_OUTCOMES,
    BonusSchedule,
    Distribution,
    MarketType,
    Match,
    Outcome,
    PayoutCalculator,
    SamplingConfig,
    Slip,
    generate_slips,
    score_grid,
)
from ..utils.id_handler import IDFlex
from .validation_service import ValidationService

logger = logging.getLogger("engine_api.services")


def suggested_slip_count(match_count: int, cap: int = MAX_SLIP_COUNT) -> int:
    """3^n slips cover every 1X2 combination; capped to keep batches tractable."""
    if match_count <= 0:
        return 0
    # Avoid building a huge integer for long match lists
    if match_count > 40:
        return cap
    return min(3 ** match_count, cap)


class SlipService:
    """Service for generating and valuing outcome slips."""

    def __init__(self, validation_service: Optional[ValidationService] = None):
        self.validation_service = validation_service or ValidationService()

    # ------------------------------------------------------------------
    # Payload -> domain
    # ------------------------------------------------------------------
    def build_matches(self, raw_matches: List[Dict[str, Any]]) -> List[Match]:
        matches = []
        for index, raw in enumerate(raw_matches):
            odds = raw.get("odds") or {}
            matches.append(Match(
                match_id=IDFlex.match_id(raw.get("match_id"), index),
                home_team=str(raw.get("home_team", "")).strip(),
                away_team=str(raw.get("away_team") or "Away").strip(),
                odds={str(code): float(value) for code, value in odds.items()},
            ))
        return matches

    def build_config(self, payload: Dict[str, Any]) -> SamplingConfig:
        dist = payload.get("distribution") or {}
        config = SamplingConfig(
            market=MarketType.parse(payload.get("market", MarketType.THREE_WAY)),
            distribution=Distribution(**dist),
            max_consecutive=payload.get("max_consecutive", DEFAULT_MAX_CONSECUTIVE),
            max_goals=payload.get("max_goals", DEFAULT_MAX_GOALS),
        )
        return self.validation_service.validate_sampling_config(config)

    # ------------------------------------------------------------------
    # generate
    # ------------------------------------------------------------------
    def generate(self, payload: Any, request_id: str = "unknown") -> Dict[str, Any]:
        """
        Validate, generate and value one batch.

        Returns:
            {"generated_slips": [...], "metadata": {...}}

        Raises:
            PayloadValidationError / InvalidConfigError: On bad input
        """
        payload = self.validation_service.validate_generation_request(payload, request_id)

        matches = self.build_matches(payload.get("matches") or [])
        config = self.build_config(payload)
        stake = payload.get("stake", 0) or 0

        suggested = suggested_slip_count(len(matches))
        count = payload.get("count")
        if count is None:
            count = suggested

        logger.info(
            f"[{request_id}] [SERVICE] Generating | "
            f"Market: {config.market.value} | "
            f"Matches: {len(matches)} | "
            f"Count: {count} | "
            f"Max consecutive: {config.max_consecutive}"
        )

        start = time.time()
        slips, stats = generate_slips(
            matches,
            count,
            config,
            stake=stake,
            seed=payload.get("seed"),
        )
        duration = time.time() - start

        metadata = {
            "market": config.market.value,
            "match_count": len(matches),
            "requested_count": count,
            "suggested_slip_count": suggested,
            "total_slips": len(slips),
            "forced_substitutions": stats.forced_substitutions,
            "max_consecutive": config.max_consecutive,
            "stake": float(stake),
            "currency": CURRENCY,
            "processing_time": round(duration, 4),
            "generated_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if config.market is MarketType.CORRECT_SCORE:
            metadata["max_goals"] = config.max_goals
            metadata["scores_per_match"] = len(score_grid(config.max_goals))

        logger.info(
            f"[{request_id}] [SERVICE] Generation complete | "
            f"Slips: {len(slips)} | "
            f"Forced: {stats.forced_substitutions} | "
            f"Duration: {duration:.3f}s"
        )

        return {
            "generated_slips": [slip.to_dict() for slip in slips],
            "metadata": metadata,
        }

    # ------------------------------------------------------------------
    # valuate
    # ------------------------------------------------------------------
    def valuate_legs(self, legs: List[Dict[str, Any]], stake: Any) -> Dict[str, Any]:
        """Value a caller-built slip: each leg carries its own outcome and odds."""
        stake = self.validation_service.validate_stake(stake)
        outcomes = []
        for index, leg in enumerate(legs):
            match = Match(
                match_id=IDFlex.match_id(leg.get("match_id"), index),
                home_team="",
                away_team="",
                odds={leg["outcome"]: float(leg.get("odds", DEFAULT_ODDS))},
            )
            outcomes.append(Outcome(match_id=match.match_id, match=match, outcome=leg["outcome"]))

        slip = Slip(slip_id="valuation", outcomes=outcomes)
        valuation = PayoutCalculator().valuate(slip, stake)
        result = valuation.to_dict()
        result["gross_profit"] = float(valuation.gross_profit)
        result["gross_winnings"] = float(valuation.gross_winnings)
        return result

    # ------------------------------------------------------------------
    # Informational
    # ------------------------------------------------------------------
    def get_market_info(self) -> Dict[str, Dict[str, Any]]:
        return {
            MarketType.THREE_WAY.value: {
                "name": "Match Result (1X2)",
                "outcomes": list(MARKET_OUTCOMES[MarketType.THREE_WAY]),
                "distribution_keys": ["home", "draw", "away"],
                "sampled": True,
            },
            MarketType.GOALS.value: {
                "name": "Over/Under 2.5 Goals",
                "outcomes": list(MARKET_OUTCOMES[MarketType.GOALS]),
                "distribution_keys": ["over", "under"],
                "sampled": True,
            },
            MarketType.CORRECT_SCORE.value: {
                "name": "Correct Score Coverage",
                "outcomes": "every 'H-A' score with H + A <= max_goals",
                "default_max_goals": DEFAULT_MAX_GOALS,
                "sampled": False,
            },
        }

    def get_bonus_schedule(self) -> Dict[str, Any]:
        return BonusSchedule().to_dict()
