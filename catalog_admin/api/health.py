"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

import structlog
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from catalog_admin.api.dependencies import SettingsDep, StoreDep

logger = structlog.get_logger()

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="catalog-admin-api",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check(store: StoreDep) -> dict[str, str]:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status.

    Raises:
        HTTPException: 503 if the store cannot be reached.
    """
    try:
        await store.ping()
    except (SQLAlchemyError, OSError) as e:
        logger.error("Readiness check failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        ) from e
    return {"status": "ready"}
