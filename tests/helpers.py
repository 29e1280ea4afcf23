"""Helpers shared by the API tests."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from redis.exceptions import RedisError

DEFAULT_PASSWORD = "Secure@Pass1"


class FakeRedisClient:
    """In-memory stand-in for ``RedisClient`` (rate limit counters + ping)."""

    def __init__(self, available: bool = True):
        self.available = available
        self.counters: dict[str, int] = {}

    async def incr_window(self, key: str, window_seconds: int) -> int:
        if not self.available:
            raise RedisError("Redis is not connected")
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    async def ping(self) -> bool:
        return self.available


@dataclass
class AuthenticatedUser:
    id: UUID
    username: str
    email: str
    password: str
    access_token: str
    refresh_token: Optional[str]
    device: str

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"}


def refresh_cookie_from(response, name: str = "refresh_token") -> Optional[str]:
    """Value of the refresh cookie set by ``response``, if any."""
    for header in response.headers.get_list("set-cookie"):
        cookie_name, _, rest = header.partition("=")
        if cookie_name.strip() == name:
            return rest.split(";", 1)[0]
    return None


def cookie_header(token: str, device: str) -> dict:
    """The secure cookie is not replayed over http, so send it explicitly."""
    return {"Cookie": f"refresh_token={token}", "X-Device": device}
