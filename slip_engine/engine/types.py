# engine/types.py
"""
Shared outcome / market definitions for the slip engine.

Domain models are plain dataclasses. Matches are frozen and referenced
(never copied) by the outcomes generated for them.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Any, Optional, Tuple, Mapping

from ..config import DEFAULT_MAX_CONSECUTIVE, DEFAULT_MAX_GOALS, DEFAULT_ODDS
from ..exceptions import InvalidConfigError, SlipBuilderError


class MarketType(str, Enum):
    THREE_WAY = "1x2"
    GOALS = "goals"
    CORRECT_SCORE = "correct_score"

    @classmethod
    def parse(cls, raw: Any) -> "MarketType":
        """Accept an enum member, its value or its name (any case)."""
        if isinstance(raw, cls):
            return raw
        key = str(raw).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise InvalidConfigError(
            f"Unknown market '{raw}' (expected one of: {', '.join(m.value for m in cls)})",
            field="market"
        )


# Outcome codes
HOME = "1"
DRAW = "X"
AWAY = "2"
OVER = "Over 2.5"
UNDER = "Under 2.5"

MARKET_OUTCOMES: Dict[MarketType, Tuple[str, ...]] = {
    MarketType.THREE_WAY: (HOME, DRAW, AWAY),
    MarketType.GOALS: (OVER, UNDER),
}


def default_odds() -> Dict[str, float]:
    return {HOME: DEFAULT_ODDS, DRAW: DEFAULT_ODDS, AWAY: DEFAULT_ODDS}


@dataclass(frozen=True)
class Match:
    match_id: str
    home_team: str
    away_team: str
    odds: Mapping[str, float] = field(default_factory=default_odds)

    def __post_init__(self):
        for code, value in self.odds.items():
            if value is None or not math.isfinite(float(value)) or float(value) <= 0:
                raise InvalidConfigError(
                    f"Odds for '{code}' in match {self.match_id} must be a positive finite number (got {value})",
                    field="odds"
                )

    def odds_for(self, code: str) -> float:
        """Configured odds for an outcome code; 1.0 when the match has none."""
        return self.odds.get(code, DEFAULT_ODDS)

    @property
    def label(self) -> str:
        return f"{self.home_team} vs {self.away_team}"


@dataclass(frozen=True)
class Outcome:
    match_id: str
    match: Match = field(compare=False, repr=False)
    outcome: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_id": self.match_id,
            "home_team": self.match.home_team,
            "away_team": self.match.away_team,
            "outcome": self.outcome,
            "odds": self.match.odds_for(self.outcome),
        }


@dataclass(frozen=True)
class Distribution:
    """Non-negative sampling weights. Only the weights of the active market are used."""
    home: float = 33.0
    draw: float = 33.0
    away: float = 33.0
    over: float = 50.0
    under: float = 50.0


@dataclass(frozen=True)
class SamplingConfig:
    market: MarketType = MarketType.THREE_WAY
    distribution: Distribution = field(default_factory=Distribution)
    max_consecutive: int = DEFAULT_MAX_CONSECUTIVE
    max_goals: int = DEFAULT_MAX_GOALS

    def validate(self) -> "SamplingConfig":
        """Reject configs outside the numeric domain. Returns self for chaining."""
        if not isinstance(self.market, MarketType):
            raise InvalidConfigError(f"Invalid market: {self.market!r}", field="market")

        for name in ("home", "draw", "away", "over", "under"):
            weight = getattr(self.distribution, name)
            if weight is None or not math.isfinite(weight) or weight < 0:
                raise InvalidConfigError(
                    f"Distribution weight '{name}' must be a non-negative finite number (got {weight})",
                    field=f"distribution.{name}"
                )

        if isinstance(self.max_consecutive, bool) or not isinstance(self.max_consecutive, int):
            raise InvalidConfigError(
                f"max_consecutive must be an integer (got {self.max_consecutive!r})",
                field="max_consecutive"
            )
        if self.max_consecutive < 1:
            raise InvalidConfigError(
                f"max_consecutive must be at least 1 (got {self.max_consecutive})",
                field="max_consecutive"
            )

        if isinstance(self.max_goals, bool) or not isinstance(self.max_goals, int):
            raise InvalidConfigError(
                f"max_goals must be an integer (got {self.max_goals!r})",
                field="max_goals"
            )
        if self.max_goals < 0:
            raise InvalidConfigError(
                f"max_goals cannot be negative (got {self.max_goals})",
                field="max_goals"
            )
        return self


@dataclass(frozen=True)
class Valuation:
    total_odds: Decimal
    stake: Decimal
    legs: int
    bonus_percent: int
    win_bonus: Decimal
    tax: Decimal
    payout: Decimal
    gross_profit: Decimal
    gross_winnings: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_odds": float(self.total_odds),
            "stake": float(self.stake),
            "legs": self.legs,
            "bonus_percent": self.bonus_percent,
            "win_bonus": float(self.win_bonus),
            "tax": float(self.tax),
            "payout": float(self.payout),
        }


@dataclass
class Slip:
    slip_id: str
    outcomes: Tuple[Outcome, ...]
    valuation: Optional[Valuation] = None

    def __post_init__(self):
        self.outcomes = tuple(self.outcomes)

    @property
    def legs(self) -> int:
        return len(self.outcomes)

    def codes(self) -> List[str]:
        return [o.outcome for o in self.outcomes]

    def attach_valuation(self, valuation: Valuation) -> "Slip":
        # Valuation fields are added once; outcomes never change.
        if self.valuation is not None and self.valuation != valuation:
            raise SlipBuilderError(
                f"Slip {self.slip_id} already carries a different valuation",
                error_code="SLIP_ALREADY_VALUED"
            )
        self.valuation = valuation
        return self

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "slip_id": self.slip_id,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "legs": self.legs,
        }
        if self.valuation is not None:
            data.update(self.valuation.to_dict())
        return data
