"""Redis client used for rate limiting counters."""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..config import Settings, get_settings
from .logging import get_logger

logger = get_logger("redis")


class RedisClient:
    """Thin wrapper over a pooled ``redis.asyncio`` connection."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.redis: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect and ping; raises when Redis is unreachable."""
        self.redis = redis.from_url(
            self.settings.redis_url,
            max_connections=self.settings.redis_max_connections,
            decode_responses=True,
        )
        await self.redis.ping()
        logger.info("Connected to Redis")

    async def disconnect(self) -> None:
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    @property
    def is_connected(self) -> bool:
        return self.redis is not None

    async def ping(self) -> bool:
        if not self.redis:
            return False
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            logger.error("Redis PING failed", extra={"error": str(e)})
            return False

    async def incr_window(self, key: str, window_seconds: int) -> int:
        """Increment a fixed-window counter, starting its TTL on first hit.

        INCR and EXPIRE NX go out as one MULTI/EXEC, so a counter can never
        be left without a TTL. Raises ``RedisError`` so callers decide how
        to degrade.
        """
        if not self.redis:
            raise RedisError("Redis is not connected")
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.expire(key, window_seconds, nx=True)
            count, _ = await pipe.execute()
        return int(count)


# Global Redis client instance
redis_client = RedisClient()


def get_redis_client() -> RedisClient:
    """Get Redis client instance."""
    return redis_client
