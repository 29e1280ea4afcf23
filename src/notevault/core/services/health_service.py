"""Health service implementation."""

import time
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ..redis_client import RedisClient, get_redis_client
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(
        self,
        session: AsyncSession,
        redis_client: Optional[RedisClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.redis_client = redis_client or get_redis_client()
        self.settings = settings or get_settings()

    async def get_health_status(self) -> HealthCheckResponse:
        db_health = await self.check_database_health()
        redis_health = await self.check_redis_health()

        # redis only feeds the rate limiter, which fails open
        if not db_health["connected"]:
            overall = "unhealthy"
        elif not redis_health["connected"]:
            overall = "degraded"
        else:
            overall = "healthy"

        return HealthCheckResponse(
            status=overall,
            version=self.settings.app_version,
            checks={"database": db_health, "redis": redis_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        started = time.perf_counter()
        try:
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
        except SQLAlchemyError as e:
            return {"connected": False, "status": "unhealthy", "error": type(e).__name__}
        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
        }

    async def check_redis_health(self) -> Dict[str, Any]:
        started = time.perf_counter()
        if not await self.redis_client.ping():
            return {"connected": False, "status": "unhealthy"}
        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
        }
