"""
Pydantic Schemas for the PropScore API
======================================
Request and response models for the API endpoints. Wire format is camelCase;
models are populated with snake_case names.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from propscore.config.constants import SPORT_LABEL
from propscore.core.schemas import GameLogEntry, PropsResult, ScoredProp

# ==============================================================================
# Request Models
# ==============================================================================


class PropsRequest(BaseModel):
    """
    Request body for the ML props endpoint.

    Fields are optional at the schema level so a missing team or sport gets
    the pipeline's own 400 message.

    Example:
        {"team1": "Lakers", "team2": "Celtics", "sport": "nba", "gameDate": "2025-11-20"}
    """

    team1: Optional[str] = Field(None, max_length=100, description="First team (full or partial name)")
    team2: Optional[str] = Field(None, max_length=100, description="Second team (full or partial name)")
    sport: Optional[str] = Field(None, max_length=20, description="League (only 'nba')")
    game_date: Optional[date] = Field(None, description="Game date (defaults to the event start)")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "team1": "Los Angeles Lakers",
                "team2": "Boston Celtics",
                "sport": "nba",
                "gameDate": "2025-11-20",
            }
        }


# ==============================================================================
# Props Response Models
# ==============================================================================


class PlayerStatsResponse(BaseModel):
    """Last-10 per-game averages."""

    avg_points: float
    avg_rebounds: float
    avg_assists: float
    avg_minutes: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TopPropResponse(BaseModel):
    """One recommended prop."""

    player_name: str = Field(..., description="Player's full name")
    team: str = Field(..., description="Player's team")
    is_home: bool
    stat_type: str = Field(..., description="Provider stat ID")
    line: float = Field(..., description="Consensus line")
    prediction: str = Field(..., description="'over' or 'under'")
    probability_over: float = Field(..., ge=0, le=1)
    probability_under: float = Field(..., ge=0, le=1)
    confidence: float = Field(..., ge=0, le=1)
    confidence_percent: str
    confidence_tier: str
    should_bet: bool
    betting_value: str
    odds_over: float
    odds_under: float
    bookmaker_over: Optional[str] = None
    bookmaker_under: Optional[str] = None
    games_used: int = Field(..., ge=0, description="Game logs available for the player")
    player_stats: PlayerStatsResponse

    @classmethod
    def from_scored(cls, scored: ScoredProp) -> "TopPropResponse":
        candidate, prediction = scored.candidate, scored.prediction
        return cls(
            player_name=candidate.player_name,
            team=candidate.team,
            is_home=candidate.is_home,
            stat_type=candidate.stat_type,
            line=candidate.line,
            prediction=prediction.prediction,
            probability_over=prediction.probability_over,
            probability_under=prediction.probability_under,
            confidence=prediction.confidence,
            confidence_percent=prediction.confidence_percent,
            confidence_tier=prediction.confidence_tier.value,
            should_bet=prediction.should_bet,
            betting_value=prediction.betting_value,
            odds_over=candidate.odds_over,
            odds_under=candidate.odds_under,
            bookmaker_over=candidate.bookmaker_over,
            bookmaker_under=candidate.bookmaker_under,
            games_used=scored.games_used,
            player_stats=PlayerStatsResponse(**scored.player_stats.model_dump()),
        )

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "playerName": "LeBron James",
                "team": "Los Angeles Lakers",
                "isHome": True,
                "statType": "points",
                "line": 28.5,
                "prediction": "under",
                "probabilityOver": 0.38,
                "probabilityUnder": 0.62,
                "confidence": 0.12,
                "confidencePercent": "12.0",
                "confidenceTier": "medium",
                "shouldBet": True,
                "bettingValue": "medium",
                "oddsOver": -110,
                "oddsUnder": -105,
                "bookmakerOver": "DraftKings",
                "bookmakerUnder": "FanDuel",
                "gamesUsed": 15,
                "playerStats": {
                    "avgPoints": 25.1,
                    "avgRebounds": 7.4,
                    "avgAssists": 8.2,
                    "avgMinutes": 34.6,
                },
            }
        }


class TeamsResponse(BaseModel):
    home: str
    away: str


class PropsResponse(BaseModel):
    """
    Response body for the ML props endpoint.

    Contains the matched game, pipeline counts and the ranked props.
    """

    success: bool = True
    sport: str = SPORT_LABEL
    event_id: str
    teams: TeamsResponse
    game_time: Optional[str] = None
    total_props_available: int
    star_player_props_analyzed: int
    high_confidence_count: int
    medium_confidence_count: int
    top_props: List[TopPropResponse]
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_result(cls, result: PropsResult) -> "PropsResponse":
        return cls(
            event_id=result.event_id,
            teams=TeamsResponse(home=result.home_team, away=result.away_team),
            game_time=result.game_time,
            total_props_available=result.total_props_available,
            star_player_props_analyzed=result.star_player_props_analyzed,
            high_confidence_count=result.high_confidence_count,
            medium_confidence_count=result.medium_confidence_count,
            top_props=[TopPropResponse.from_scored(prop) for prop in result.top_props],
        )

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "success": True,
                "sport": "NBA",
                "eventId": "abc123",
                "teams": {"home": "Los Angeles Lakers", "away": "Boston Celtics"},
                "gameTime": "2025-11-21T03:30:00.000Z",
                "totalPropsAvailable": 42,
                "starPlayerPropsAnalyzed": 9,
                "highConfidenceCount": 1,
                "mediumConfidenceCount": 2,
                "topProps": [],
                "timestamp": "2025-11-20T14:30:00",
            }
        }


class ErrorResponse(BaseModel):
    """
    Error response body.

    Returned when a request fails.
    """

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details (DEBUG only)")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "No matching game found",
                "message": "Could not find an upcoming game between these teams with available odds",
            }
        }


# ==============================================================================
# Health Check Response Models
# ==============================================================================


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    environment: str = Field(..., description="Deployment environment")
    timestamp: datetime = Field(default_factory=datetime.now, description="Check timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "environment": "production",
                "timestamp": "2025-11-20T14:30:00",
            }
        }


class ModelHealthResponse(BaseModel):
    """Model endpoint connectivity."""

    status: str = Field(..., description="'connected', 'auth_failed' or 'not_configured'")
    authenticated: bool
    endpoint: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now, description="Check timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "connected",
                "authenticated": True,
                "endpoint": "https://us-central1-aiplatform.googleapis.com/v1/projects/p/"
                "locations/us-central1/endpoints/123:predict",
                "timestamp": "2025-11-20T14:30:00",
            }
        }


# ==============================================================================
# Game Log Response Models
# ==============================================================================


class GameLogResponse(BaseModel):
    game_date: date
    minutes: float
    points: float
    rebounds: float
    assists: float
    steals: float
    blocks: float
    turnovers: float
    fgm: float
    fga: float
    fg3m: float = Field(..., alias="fg3m")
    fg3a: float = Field(..., alias="fg3a")
    ftm: float
    fta: float

    @classmethod
    def from_entry(cls, entry: GameLogEntry) -> "GameLogResponse":
        return cls(**entry.model_dump())

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class GameLogsResponse(BaseModel):
    """Most recent games for a player, newest first."""

    player_id: int
    season: int
    count: int
    games: List[GameLogResponse]

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "playerId": 265,
                "season": 2025,
                "count": 1,
                "games": [
                    {
                        "gameDate": "2025-11-18",
                        "minutes": 34.2,
                        "points": 28,
                        "rebounds": 7,
                        "assists": 9,
                        "steals": 1,
                        "blocks": 0,
                        "turnovers": 3,
                        "fgm": 11,
                        "fga": 20,
                        "fg3m": 2,
                        "fg3a": 6,
                        "ftm": 4,
                        "fta": 5,
                    }
                ],
            }
        }
