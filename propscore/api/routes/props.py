"""
Props Endpoints
===============
Ranked ML player prop recommendations for one upcoming game.
"""

import logging

from fastapi import APIRouter, Depends

from propscore.api.dependencies import get_orchestrator
from propscore.api.schemas import ErrorResponse, PropsRequest, PropsResponse
from propscore.pipeline.orchestrator import PropsOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/props", tags=["Props"])


@router.post(
    "/ml",
    response_model=PropsResponse,
    summary="Get ML props for a game",
    description="Scores star player props for the game between two teams and returns the top recommendations.",
    responses={
        200: {"description": "Ranked props (may be empty when nothing is recommended)"},
        400: {"model": ErrorResponse, "description": "Missing fields or unsupported sport"},
        404: {"model": ErrorResponse, "description": "No game, no props, or no star player props"},
        502: {"model": ErrorResponse, "description": "Model endpoint authentication failed"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
)
async def get_ml_props(
    request: PropsRequest,
    orchestrator: PropsOrchestrator = Depends(get_orchestrator),
) -> PropsResponse:
    """
    Get top ML props for a game.

    Example request:
    ```json
    {"team1": "Lakers", "team2": "Celtics", "sport": "nba"}
    ```
    """
    logger.info(
        f"Props request: {request.team1} vs {request.team2}",
        extra={"sport": request.sport, "game_date": str(request.game_date) if request.game_date else None},
    )
    result = await orchestrator.get_top_props(
        request.team1, request.team2, request.sport, game_date=request.game_date
    )
    return PropsResponse.from_result(result)
