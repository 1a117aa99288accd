"""
API Routes
==========
FastAPI routers for props, health checks and player game logs.
"""

from propscore.api.routes.health import router as health_router
from propscore.api.routes.players import router as players_router
from propscore.api.routes.props import router as props_router

__all__ = ["health_router", "players_router", "props_router"]
