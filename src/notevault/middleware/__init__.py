"""Request dependencies for authentication, guards and rate limiting."""

from .auth import (
    JWTBearer,
    get_current_user_id,
    get_optional_user_id,
    get_refresh_cookie,
)
from .device import get_device_label
from .guards import require_note_access, require_note_owner
from .rate_limit import RateLimiter, auth_rate_limit, general_rate_limit

__all__ = [
    "JWTBearer",
    "get_current_user_id",
    "get_optional_user_id",
    "get_refresh_cookie",
    "get_device_label",
    "require_note_owner",
    "require_note_access",
    "RateLimiter",
    "general_rate_limit",
    "auth_rate_limit",
]
