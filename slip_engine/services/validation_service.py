"""
Validation Service

Handles request validation before anything reaches the engine:
- Payload structure validation
- Numeric domain validation (count, stake, match count)
- Sampling config validation (delegated to SamplingConfig)
"""

import logging
import math
from typing import Any, Dict, Optional

from ..config import (
    MIN_STAKE,
    MAX_STAKE,
    MAX_MATCHES,
    MAX_SLIP_COUNT,
)
from ..engine import SamplingConfig
from ..exceptions import InvalidConfigError, PayloadValidationError

logger = logging.getLogger("engine_api.services")


class ValidationService:
    """Service for validating inputs and payloads."""

    def validate_generation_request(
        self,
        payload: Any,
        request_id: str = "unknown"
    ) -> Dict[str, Any]:
        """
        Validate a slip generation request.

        Args:
            payload: Request payload (pydantic model or dict)
            request_id: Request identifier for logging

        Returns:
            Normalized payload dictionary

        Raises:
            PayloadValidationError: If the structure is wrong
            InvalidConfigError: If a numeric value is out of range
        """
        if payload is None:
            raise PayloadValidationError("Empty request payload", field="payload")

        # Handle Pydantic models
        if hasattr(payload, "model_dump"):
            payload = payload.model_dump()

        if not isinstance(payload, dict):
            raise PayloadValidationError(
                f"Invalid payload type: {type(payload).__name__}",
                field="payload"
            )

        matches = payload.get("matches") or []
        if not isinstance(matches, list):
            raise PayloadValidationError(
                f"Invalid 'matches' type: {type(matches).__name__}",
                field="matches"
            )

        if len(matches) > MAX_MATCHES:
            raise PayloadValidationError(
                f"Too many matches: {len(matches)} (max: {MAX_MATCHES})",
                field="matches"
            )

        if not matches:
            # Not an error: every slip will simply be empty
            logger.warning(f"[{request_id}] [VALIDATION] Request has no matches")

        self.validate_count(payload.get("count"))
        self.validate_stake(payload.get("stake", 0))

        logger.debug(
            f"[{request_id}] [VALIDATION] Payload validation passed | "
            f"Matches: {len(matches)} | "
            f"Market: {payload.get('market')}"
        )

        return payload

    def validate_count(self, count: Optional[int]) -> None:
        if count is None:
            return
        if count < 0:
            raise InvalidConfigError(f"count cannot be negative (got {count})", field="count")
        if count > MAX_SLIP_COUNT:
            raise InvalidConfigError(
                f"count too high: {count} (max: {MAX_SLIP_COUNT})",
                field="count"
            )

    def validate_stake(self, stake: Any) -> float:
        try:
            stake = float(stake)
        except (ValueError, TypeError):
            raise InvalidConfigError(f"Invalid stake value: {stake!r}", field="stake")

        if not math.isfinite(stake):
            raise InvalidConfigError(f"Stake must be a finite number (got {stake})", field="stake")
        if stake < MIN_STAKE:
            raise InvalidConfigError(
                f"Stake too low: {stake} (min: {MIN_STAKE})",
                field="stake"
            )
        if stake > MAX_STAKE:
            raise InvalidConfigError(
                f"Stake too high: {stake} (max: {MAX_STAKE})",
                field="stake"
            )
        return stake

    def validate_sampling_config(self, config: SamplingConfig) -> SamplingConfig:
        return config.validate()
