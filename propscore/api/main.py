"""
PropScore API
=============
FastAPI application for ML-backed NBA player prop recommendations.

Features:
- Ranked, confidence-scored props for one upcoming game
- Health checks (API liveness, model endpoint authentication)
- Cached game log inspection
- CORS support for web and mobile clients

Usage:
    # Development
    uvicorn propscore.api.main:app --reload --port 8000

    # Production
    uvicorn propscore.api.main:app --host 0.0.0.0 --port 8000 --workers 4

API Documentation:
    - Swagger UI: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc
    - OpenAPI JSON: http://localhost:8000/openapi.json
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError as BodyValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from propscore import __version__
from propscore.api.dependencies import ServiceContainer
from propscore.api.routes import health_router, players_router, props_router
from propscore.config import get_environment, is_production
from propscore.config.settings import Settings
from propscore.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    PropScoreError,
    ValidationError,
)
from propscore.core.logging_config import setup_logging

setup_logging("propscore_api")
logger = logging.getLogger(__name__)

settings = Settings.from_env()


# ==============================================================================
# Application Lifespan
# ==============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Opens the shared HTTP session at startup and closes it at shutdown.
    Provider clients are created on first use.
    """
    logger.info("=" * 60)
    logger.info("PropScore API starting...")
    logger.info(f"Version: {__version__} ({get_environment()})")
    logger.info("=" * 60)

    services = ServiceContainer(settings)
    await services.start()
    app.state.services = services

    yield

    logger.info("PropScore API shutting down...")
    await services.close()


# ==============================================================================
# Create FastAPI Application
# ==============================================================================

app = FastAPI(
    title="PropScore API",
    description="""
## NBA Player Props ML API

Scores star player over/under props for one upcoming game with a hosted
classifier and returns the most confident recommendations.

### Pipeline

1. Find the upcoming game between the two requested teams
2. Extract priced over/under player props (consensus line, best odds)
3. Keep tracked star players
4. Build an 88-feature vector per prop from recent game logs and market odds
5. Score with the hosted model and keep high/medium confidence props (top 10)

### Confidence Tiers

| Tier | Confidence |
|------|------------|
| high | > 0.15 |
| medium | 0.10 - 0.15 |
| low | < 0.10 |
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=[
        {"name": "Props", "description": "ML prop recommendations"},
        {"name": "Health", "description": "Health checks and status monitoring"},
        {"name": "Players", "description": "Cached player data"},
    ],
)


# ==============================================================================
# CORS Middleware
# ==============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==============================================================================
# Exception Handlers
# ==============================================================================


def error_response(status_code: int, exc: PropScoreError) -> JSONResponse:
    label = getattr(exc, "error_label", type(exc).__name__)
    return JSONResponse(status_code=status_code, content={"error": label, "message": str(exc)})


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    logger.info(f"Rejected request: {exc}", extra={"path": request.url.path})
    return error_response(400, exc)


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    logger.info(f"Nothing to return: {exc}", extra={"path": request.url.path})
    return error_response(404, exc)


@app.exception_handler(AuthenticationError)
async def authentication_exception_handler(request: Request, exc: AuthenticationError):
    logger.error(f"Model authentication failed: {exc}", extra={"path": request.url.path})
    return error_response(502, exc)


@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error: {exc}", extra={"path": request.url.path})
    return error_response(500, exc)


@app.exception_handler(BodyValidationError)
async def body_validation_exception_handler(request: Request, exc: BodyValidationError):
    """Schema failures (bad JSON, wrong types, bad dates) use the same 400 shape."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "message": problems or "Request validation failed"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    Logs the error and returns a standardized error response.
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True, extra={"path": request.url.path})

    content = {
        "error": "Internal server error",
        "message": "An unexpected error occurred",
    }
    if settings.debug and not is_production():
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ==============================================================================
# Include Routers
# ==============================================================================

app.include_router(props_router)
app.include_router(health_router)
app.include_router(players_router)


# ==============================================================================
# Root Endpoint
# ==============================================================================


@app.get(
    "/",
    tags=["Root"],
    summary="API Information",
    description="Returns basic API information and links to documentation.",
)
async def root():
    """
    Root endpoint.

    Returns API information and documentation links.
    """
    return {
        "name": "PropScore API",
        "version": __version__,
        "description": "ML recommendations for NBA player props",
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        },
        "endpoints": {
            "props": {"ml": "POST /props/ml"},
            "health": {
                "basic": "GET /health",
                "model": "GET /health/model",
            },
            "players": {"game_logs": "GET /players/{player_id}/game-logs"},
        },
        "timestamp": datetime.now().isoformat(),
    }


# ==============================================================================
# Main Entry Point
# ==============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "propscore.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.api_reload,
        log_level="info",
    )
