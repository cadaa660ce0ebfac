"""Health check API endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.redis_client import RedisClient, get_redis_client
from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from ..database import get_db_session

router = APIRouter(prefix="/health", tags=["health"])


def get_health_service(
    session: AsyncSession = Depends(get_db_session),
    redis_client: RedisClient = Depends(get_redis_client),
) -> HealthService:
    return HealthService(session, redis_client)


@router.get("/", response_model=HealthCheckResponse)
async def health_check(health: HealthService = Depends(get_health_service)):
    """Overall system health."""
    return await health.get_health_status()


@router.get("/database", response_model=Dict[str, Any])
async def database_health(health: HealthService = Depends(get_health_service)):
    return await health.check_database_health()


@router.get("/redis", response_model=Dict[str, Any])
async def redis_health(health: HealthService = Depends(get_health_service)):
    return await health.check_redis_health()
