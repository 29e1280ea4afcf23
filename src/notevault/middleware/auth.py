"""Authentication dependencies."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import Settings, get_settings
from ..core.errors import AuthenticationError
from ..security import get_token_issuer


class JWTBearer(HTTPBearer):
    """Extracts the bearer token; ``required=False`` lets anonymous callers through."""

    def __init__(self, required: bool = True):
        super().__init__(auto_error=False)
        self.required = required

    async def __call__(self, request: Request) -> Optional[str]:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
            return credentials.credentials
        if self.required:
            raise AuthenticationError("Not authenticated", code="MISSING_TOKEN")
        return None


bearer_scheme = JWTBearer()
optional_bearer_scheme = JWTBearer(required=False)


async def get_current_user_id(
    token: str = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> UUID:
    """User id from a valid access token; 401 otherwise."""
    claims = get_token_issuer(settings).verify_access(token)
    return claims["sub"]


async def get_optional_user_id(
    token: Optional[str] = Depends(optional_bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[UUID]:
    """User id when a valid access token is sent, else None.

    An invalid or expired token is treated the same as no token.
    """
    if not token:
        return None
    try:
        return get_token_issuer(settings).verify_access(token)["sub"]
    except AuthenticationError:
        return None


def get_refresh_cookie(request: Request, settings: Settings = Depends(get_settings)) -> Optional[str]:
    return request.cookies.get(settings.refresh_cookie_name)
