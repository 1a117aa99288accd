"""
Pydantic Models for the Props Pipeline
======================================
Value objects passed between the fetchers, feature engine, inference client
and orchestrator, plus the hosted model's response contract.

Usage:
    from propscore.core.schemas import GameLogEntry, PropCandidate

    entry = GameLogEntry(game_date="2025-11-18", minutes="34:12", points=28, ...)
    entry.minutes  # 34.2
"""

import datetime
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from propscore.core.confidence import ConfidenceTier


def parse_minutes(value: Any) -> float:
    """
    Parse minutes played into decimal minutes.

    Accepts "MM:SS" strings, plain numeric strings and numbers.

    Examples:
        parse_minutes("34:30") -> 34.5
        parse_minutes("28") -> 28.0
        parse_minutes(None) -> 0.0
    """
    if value is None or value == "":
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    text = str(value).strip()
    if ":" in text:
        mins, _, secs = text.partition(":")
        try:
            return int(mins or 0) + int(secs or 0) / 60.0
        except ValueError:
            return 0.0
    try:
        parsed = float(text)
    except ValueError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


# ==============================================================================
# Game Logs
# ==============================================================================


class GameLogEntry(BaseModel):
    """One completed game's box-score line for a player."""

    model_config = ConfigDict(frozen=True)

    game_date: datetime.date = Field(..., description="Date the game was played")
    minutes: float = Field(0.0, ge=0, description="Minutes played (decimal)")
    points: float = 0.0
    rebounds: float = 0.0
    assists: float = 0.0
    steals: float = 0.0
    blocks: float = 0.0
    turnovers: float = 0.0
    fgm: float = 0.0
    fga: float = 0.0
    fg3m: float = 0.0
    fg3a: float = 0.0
    ftm: float = 0.0
    fta: float = 0.0

    @field_validator("game_date", mode="before")
    @classmethod
    def parse_game_date(cls, v):
        """Accept ISO date or datetime strings (provider sends '2025-11-18T00:30:00.000Z')."""
        if isinstance(v, datetime.datetime):
            return v.date()
        if isinstance(v, str):
            return datetime.datetime.strptime(v[:10], "%Y-%m-%d").date()
        return v

    @field_validator("minutes", mode="before")
    @classmethod
    def parse_minutes_played(cls, v) -> float:
        return parse_minutes(v)

    @field_validator(
        "points",
        "rebounds",
        "assists",
        "steals",
        "blocks",
        "turnovers",
        "fgm",
        "fga",
        "fg3m",
        "fg3a",
        "ftm",
        "fta",
        mode="before",
    )
    @classmethod
    def coerce_counting_stat(cls, v) -> float:
        """Missing or non-numeric box-score values count as zero."""
        if v is None or v == "":
            return 0.0
        try:
            value = float(v)
        except (TypeError, ValueError):
            return 0.0
        return value if math.isfinite(value) else 0.0


# ==============================================================================
# Props
# ==============================================================================


class PropCandidate(BaseModel):
    """A single bettable over/under proposition derived from event odds."""

    model_config = ConfigDict(frozen=True)

    player_id: str = Field(..., description="Odds provider player key")
    player_name: str = Field(..., min_length=1)
    team: str = Field(..., description="Player's team (long name)")
    is_home: bool
    stat_type: str = Field(..., description="Provider stat ID, e.g. 'points'")
    line: float = Field(..., description="Consensus line across bookmakers")
    odds_over: float = Field(..., description="Best available over price (American)")
    odds_under: float = Field(..., description="Best available under price (American)")
    bookmaker_over: Optional[str] = None
    bookmaker_under: Optional[str] = None
    bookmaker_count: int = Field(1, ge=1)
    stats_player_id: Optional[int] = Field(None, description="Stats provider player id")

    @field_validator("player_name")
    @classmethod
    def normalize_player_name(cls, v: str) -> str:
        """Strip whitespace and normalize."""
        return " ".join(v.split())


# ==============================================================================
# Model Response Contract
# ==============================================================================


class ModelPredictionRecord(BaseModel):
    """One record of the hosted model's `predictions` array."""

    prediction: str
    probability_over: float = Field(..., ge=0, le=1)
    probability_under: float = Field(..., ge=0, le=1)
    confidence: float = Field(..., ge=0, le=1)
    should_bet: Optional[bool] = None
    betting_value: Optional[str] = None

    @field_validator("prediction", mode="before")
    @classmethod
    def normalize_side(cls, v) -> str:
        if not isinstance(v, str):
            raise ValueError("prediction must be a string side")
        side = v.strip().lower()
        if side not in ("over", "under"):
            raise ValueError(f"prediction must be 'over' or 'under', got {v!r}")
        return side


class ModelResponse(BaseModel):
    """Envelope returned by the prediction endpoint."""

    predictions: List[ModelPredictionRecord] = Field(..., min_length=1)
    deployedModelId: Optional[str] = None
    modelDisplayName: Optional[str] = None
    modelVersionId: Optional[str] = None


class ModelInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    deployed_model_id: Optional[str] = None
    model_display_name: Optional[str] = None
    model_version_id: Optional[str] = None


class Prediction(BaseModel):
    """
    Parsed inference output for one feature vector.

    Probabilities and confidence come straight from the model. The tier,
    bet flag and percent strings are derived during parsing.
    """

    model_config = ConfigDict(frozen=True)

    prediction: str
    probability_over: float
    probability_under: float
    confidence: float
    confidence_tier: ConfidenceTier
    should_bet: bool
    betting_value: str
    probability_over_percent: str
    probability_under_percent: str
    confidence_percent: str
    model_info: Optional[ModelInfo] = None


# ==============================================================================
# Pipeline Output
# ==============================================================================


class PlayerStatsSummary(BaseModel):
    """Long-window per-game averages shown alongside a prop."""

    model_config = ConfigDict(frozen=True)

    avg_points: float = 0.0
    avg_rebounds: float = 0.0
    avg_assists: float = 0.0
    avg_minutes: float = 0.0


class ScoredProp(BaseModel):
    """A candidate that made it through features and inference."""

    model_config = ConfigDict(frozen=True)

    candidate: PropCandidate
    prediction: Prediction
    games_used: int = Field(..., ge=0)
    player_stats: PlayerStatsSummary = Field(default_factory=PlayerStatsSummary)


class PropsResult(BaseModel):
    """Outcome of one orchestrated request."""

    event_id: str
    home_team: str
    away_team: str
    game_time: Optional[str] = None
    total_props_available: int
    star_player_props_analyzed: int
    processed_count: int
    high_confidence_count: int
    medium_confidence_count: int
    top_props: List[ScoredProp] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_counts(self) -> "PropsResult":
        if self.star_player_props_analyzed > self.total_props_available:
            raise ValueError("analyzed props cannot exceed available props")
        return self

    def summary(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "total": self.total_props_available,
            "analyzed": self.star_player_props_analyzed,
            "processed": self.processed_count,
            "high": self.high_confidence_count,
            "medium": self.medium_confidence_count,
            "returned": len(self.top_props),
        }
