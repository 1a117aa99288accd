"""
Health Check Endpoints
======================
Endpoints for monitoring API and model endpoint health.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from propscore import __version__
from propscore.api.dependencies import ServiceContainer, get_services
from propscore.api.schemas import HealthResponse, ModelHealthResponse
from propscore.config import get_environment
from propscore.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Returns basic health status and API version. Used for liveness probes.",
)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns API status and version. Suitable for liveness probes.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=get_environment(),
        timestamp=datetime.now(),
    )


@router.get(
    "/model",
    response_model=ModelHealthResponse,
    summary="Check model endpoint",
    description="Obtains an access token for the prediction endpoint. No prediction is made.",
)
async def model_health_check(services: ServiceContainer = Depends(get_services)) -> ModelHealthResponse:
    """
    Model endpoint health check.

    Reports 'not_configured' when endpoint settings are missing.
    """
    try:
        client = services.get_inference_client()
    except ConfigurationError as e:
        logger.warning(f"Model endpoint not configured: {e}")
        return ModelHealthResponse(status="not_configured", authenticated=False, error=str(e))

    result = await client.check_connection()
    return ModelHealthResponse(
        status=result["status"],
        authenticated=result["authenticated"],
        endpoint=result.get("endpoint"),
        error=result.get("error"),
        timestamp=datetime.now(),
    )
