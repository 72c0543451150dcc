from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from storefront.api.dependencies import get_cache, get_mongodb_client
from storefront.core.config import Settings, get_settings
from storefront.core.logging import get_logger
from storefront.infrastructure.cache.base import CacheStrategy
from storefront.infrastructure.database.mongodb.client import MongoDBClient

# Initialize router and logger
health_router = APIRouter()
logger = get_logger(__name__)


class HealthStatus(BaseModel):
    """Basic health status response model."""
    status: str
    version: str
    service: str


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str
    details: Optional[Dict[str, Any]] = None


class DetailedHealthStatus(HealthStatus):
    """Detailed health status with dependency information."""
    dependencies: List[DependencyStatus]


@health_router.get(
    "",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def get_health(settings: Settings = Depends(get_settings)) -> HealthStatus:
    logger.debug("Health check requested")
    return HealthStatus(status="ok", version=settings.VERSION, service=settings.PROJECT_NAME)


@health_router.get(
    "/detailed",
    response_model=DetailedHealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
    description="Pings MongoDB and the cache; reports degraded when one is unavailable.",
)
def get_detailed_health(
    settings: Settings = Depends(get_settings),
    db: MongoDBClient = Depends(get_mongodb_client),
    cache: CacheStrategy = Depends(get_cache),
) -> DetailedHealthStatus:
    checks = {"mongodb": db.health_check(), "cache": cache.health_check()}
    dependencies = [
        DependencyStatus(name=name, status=result.get("status", "unknown"), details=result)
        for name, result in checks.items()
    ]
    overall = "ok" if all(d.status == "ok" for d in dependencies) else "degraded"
    if overall != "ok":
        logger.warning("Health check degraded", extra={"dependencies": checks})

    return DetailedHealthStatus(
        status=overall,
        version=settings.VERSION,
        service=settings.PROJECT_NAME,
        dependencies=dependencies,
    )
