# slip_engine/schemas.py

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone

from .config import (
    DEFAULT_MAX_CONSECUTIVE,
    DEFAULT_MAX_GOALS,
    DEFAULT_ODDS,
)


class MatchData(BaseModel):
    """Match record as produced by the match-list parser. IDs may be int or str."""
    match_id: Optional[str] = None
    home_team: str
    away_team: str = "Away"
    odds: Dict[str, float] = Field(
        default_factory=lambda: {"1": DEFAULT_ODDS, "X": DEFAULT_ODDS, "2": DEFAULT_ODDS}
    )

    @field_validator('match_id', mode='before')
    @classmethod
    def normalize_id(cls, v):
        if v is None:
            return None
        return str(v)

    @field_validator('odds')
    @classmethod
    def positive_odds(cls, v):
        for code, value in v.items():
            if value <= 0:
                raise ValueError(f"odds for '{code}' must be positive (got {value})")
        return v

    model_config = ConfigDict(
        protected_namespaces=()
    )


class DistributionData(BaseModel):
    home: float = 33.0
    draw: float = 33.0
    away: float = 33.0
    over: float = 50.0
    under: float = 50.0


class GenerateSlipsRequest(BaseModel):
    matches: List[MatchData] = Field(default_factory=list)
    market: str = Field(default="1x2", description="1x2, goals or correct_score")
    distribution: DistributionData = Field(default_factory=DistributionData)
    max_consecutive: int = DEFAULT_MAX_CONSECUTIVE
    max_goals: int = DEFAULT_MAX_GOALS
    count: Optional[int] = Field(
        default=None,
        description="Slips to generate; defaults to the suggested count (3^n, capped)"
    )
    stake: float = 0.0
    seed: Optional[int] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "matches": [
                    {"match_id": "m-0", "home_team": "Simba", "away_team": "Yanga",
                     "odds": {"1": 2.1, "X": 3.2, "2": 3.4}},
                    {"match_id": "m-1", "home_team": "Azam", "away_team": "Coastal Union",
                     "odds": {"1": 1.6, "X": 3.6, "2": 5.5}},
                ],
                "market": "1x2",
                "distribution": {"home": 50, "draw": 25, "away": 25},
                "max_consecutive": 3,
                "count": 9,
                "stake": 1000,
            }
        }
    )


class SlipLeg(BaseModel):
    match_id: str
    home_team: str
    away_team: str
    outcome: str
    odds: float


class GeneratedSlip(BaseModel):
    slip_id: str
    outcomes: List[SlipLeg]
    legs: int
    total_odds: Optional[float] = None
    stake: Optional[float] = None
    bonus_percent: Optional[int] = None
    win_bonus: Optional[float] = None
    tax: Optional[float] = None
    payout: Optional[float] = None


class EngineResponse(BaseModel):
    generated_slips: List[GeneratedSlip]
    metadata: Optional[Dict[str, Any]] = Field(default_factory=dict)
    status: Optional[str] = "success"
    generated_at: Optional[str] = None
    total_slips: Optional[int] = None
    error: Optional[str] = None

    @field_validator('generated_at', mode='before')
    @classmethod
    def format_timestamp(cls, v):
        if v is None:
            return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        return v


class ValuationLeg(BaseModel):
    match_id: Optional[str] = None
    outcome: str
    odds: float = DEFAULT_ODDS

    @field_validator('odds')
    @classmethod
    def positive_odds(cls, v):
        if v <= 0:
            raise ValueError(f"odds must be positive (got {v})")
        return v


class ValuationRequest(BaseModel):
    legs: List[ValuationLeg] = Field(default_factory=list)
    stake: float = 0.0


class ValuationResponse(BaseModel):
    total_odds: float
    stake: float
    legs: int
    bonus_percent: int
    win_bonus: float
    tax: float
    payout: float
    gross_profit: float
    gross_winnings: float
