"""
Health check endpoints for monitoring and orchestration (K8s, Docker, etc.)

Provides multiple health check endpoints:
- /health: Basic liveness check (always returns 200)
- /health/live: Alias of /health
- /health/ready: Readiness check (storage reachable)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_session
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "bookings-api"


@router.get("/health")
async def health_check():
    """
    Basic liveness probe.

    Returns 200 OK if the application is running.
    """
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/live")
async def health_check_live():
    """Alias for /health for orchestrators that prefer the /health/live naming."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/ready")
async def health_check_ready(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    """
    Readiness probe.

    With in-memory storage the service is always ready. With a database the
    probe runs a trivial query and returns 503 when it fails.
    """
    health_status = {"status": "ready", "checks": {}}

    if settings.use_in_memory:
        health_status["checks"]["storage"] = "in_memory"
        return health_status

    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        health_status["checks"]["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.error("Readiness check: Database unhealthy", exc_info=e)
        health_status["status"] = "not_ready"
        health_status["checks"]["database"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
