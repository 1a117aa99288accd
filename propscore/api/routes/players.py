"""
Player Endpoints
================
Read-only view of the cached game logs the pipeline scores from.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from propscore.api.dependencies import get_game_log_store
from propscore.api.schemas import GameLogResponse, GameLogsResponse
from propscore.config.thresholds import WINDOW_CONFIG
from propscore.fetchers.game_logs import GameLogStore
from propscore.utils.season_helpers import current_season

router = APIRouter(prefix="/players", tags=["Players"])


@router.get(
    "/{player_id}/game-logs",
    response_model=GameLogsResponse,
    summary="Recent game logs",
    description="Most recent games for a stats-provider player id, newest first.",
)
async def get_player_game_logs(
    player_id: int,
    season: Optional[int] = Query(None, ge=1946, le=2100, description="Season start year"),
    limit: int = Query(WINDOW_CONFIG.default_log_limit, ge=1, le=50),
    store: GameLogStore = Depends(get_game_log_store),
) -> GameLogsResponse:
    season = season if season is not None else current_season()
    games = await store.get_recent_games(player_id, season=season, limit=limit)
    return GameLogsResponse(
        player_id=player_id,
        season=season,
        count=len(games),
        games=[GameLogResponse.from_entry(game) for game in games],
    )
