"""Fixed-window rate limiting backed by Redis."""

from typing import Sequence

from fastapi import Depends, Request
from redis.exceptions import RedisError

from ..config import Settings, get_settings
from ..core.errors import RateLimitError
from ..core.logging import get_logger
from ..core.redis_client import RedisClient, get_redis_client

logger = get_logger("ratelimit")


def client_ip(request: Request, trusted_proxies: Sequence[str] = ()) -> str:
    """Peer address, or the forwarded client when the peer is a trusted proxy.

    ``X-Forwarded-For`` is read right to left and trusted hops are skipped,
    so a client cannot pick its own rate limit key.
    """
    peer = request.client.host if request.client else "unknown"
    if peer not in trusted_proxies:
        return peer
    forwarded = [hop.strip() for hop in request.headers.get("x-forwarded-for", "").split(",")]
    for hop in reversed([hop for hop in forwarded if hop]):
        if hop not in trusted_proxies:
            return hop
    return peer


class RateLimiter:
    """Dependency allowing ``limit_field`` requests per window and client IP.

    Redis being unavailable never blocks a request; it is logged instead.
    """

    def __init__(self, scope: str, limit_field: str):
        self.scope = scope
        self.limit_field = limit_field

    async def __call__(
        self,
        request: Request,
        settings: Settings = Depends(get_settings),
        redis_client: RedisClient = Depends(get_redis_client),
    ) -> None:
        if not settings.rate_limit_enabled:
            return

        limit = getattr(settings, self.limit_field)
        ip = client_ip(request, settings.trusted_proxies)
        key = f"ratelimit:{self.scope}:{ip}"
        try:
            count = await redis_client.incr_window(key, settings.rate_limit_window_seconds)
        except RedisError as exc:
            logger.warning(
                "Rate limiter unavailable, allowing request",
                extra={"scope": self.scope, "error": str(exc)},
            )
            return

        if count > limit:
            logger.warning(
                "Rate limit exceeded",
                extra={"scope": self.scope, "client_ip": ip, "limit": limit},
            )
            raise RateLimitError(details={"limit": limit, "window_seconds": settings.rate_limit_window_seconds})


general_rate_limit = RateLimiter("api", "rate_limit_requests")
auth_rate_limit = RateLimiter("auth", "auth_rate_limit_requests")
