"""Health check API endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.redis_client import RedisClient, get_redis_client
from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from ..database import get_db_session

router = APIRouter(prefix="/health", tags=["health"])


def _service(
    session: AsyncSession = Depends(get_db_session),
    redis_client: RedisClient = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
) -> HealthService:
    return HealthService(session, redis_client, settings)


@router.get("", response_model=HealthCheckResponse)
async def health_check(service: HealthService = Depends(_service)):
    """Overall status with database and Redis checks."""
    return await service.get_health_status()


@router.get("/database", response_model=Dict[str, Any])
async def database_health(service: HealthService = Depends(_service)):
    return await service.check_database_health()


@router.get("/redis", response_model=Dict[str, Any])
async def redis_health(service: HealthService = Depends(_service)):
    return await service.check_redis_health()
