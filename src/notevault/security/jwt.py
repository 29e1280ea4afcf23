"""JWT token utilities."""

import hashlib
import hmac
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from ..config import Settings, get_settings
from ..core.errors import ConfigurationError, TokenExpiredError, TokenInvalidError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenIssuer:
    """Issues and verifies access/refresh tokens.

    Access and refresh tokens are signed with independent secrets, so one
    can never be accepted as the other. Refresh tokens are persisted only
    in their ``storage_form``, an HMAC under a third secret.
    """

    def __init__(self, settings: Settings):
        missing = [
            name
            for name in ("access_token_secret", "refresh_token_secret", "refresh_token_store_secret")
            if not getattr(settings, name)
        ]
        if missing:
            raise ConfigurationError(
                "Token secrets are not configured", details={"missing": missing}
            )
        self.settings = settings
        self._access_secret = settings.access_token_secret
        self._refresh_secret = settings.refresh_token_secret
        self._store_key = settings.refresh_token_store_secret.encode("utf-8")

    @property
    def access_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.access_token_expire_minutes)

    @property
    def refresh_ttl(self) -> timedelta:
        return timedelta(days=self.settings.refresh_token_expire_days)

    def _encode(self, claims: Dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        claims.update({"iat": now, "exp": now + ttl, "jti": str(uuid.uuid4())})
        return jwt.encode(claims, secret, algorithm=self.settings.algorithm)

    def issue_access(self, user_id: UUID, extra_claims: Optional[Dict[str, Any]] = None) -> str:
        """Create a short-lived access token for ``user_id``."""
        claims = dict(extra_claims or {})
        claims.update({"sub": str(user_id), "type": ACCESS_TOKEN_TYPE})
        return self._encode(claims, self._access_secret, self.access_ttl)

    def issue_refresh(self, user_id: UUID) -> str:
        """Create a long-lived refresh token for ``user_id``."""
        claims = {"sub": str(user_id), "type": REFRESH_TOKEN_TYPE}
        return self._encode(claims, self._refresh_secret, self.refresh_ttl)

    def _decode(self, token: str, secret: str, expected_type: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.settings.algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except JWTError as exc:
            raise TokenInvalidError() from exc

        if payload.get("type") != expected_type:
            raise TokenInvalidError("Wrong token type")
        try:
            payload["sub"] = UUID(str(payload.get("sub")))
        except ValueError as exc:
            raise TokenInvalidError("Malformed token subject") from exc
        return payload

    def verify_access(self, token: str) -> Dict[str, Any]:
        """Return the claims of a valid access token, ``sub`` as a UUID."""
        return self._decode(token, self._access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh(self, token: str) -> Dict[str, Any]:
        """Return the claims of a valid refresh token, ``sub`` as a UUID."""
        return self._decode(token, self._refresh_secret, REFRESH_TOKEN_TYPE)

    def storage_form(self, raw_token: str) -> str:
        """Keyed hash of a refresh token, the only form that is persisted."""
        return hmac.new(self._store_key, raw_token.encode("utf-8"), hashlib.sha256).hexdigest()


def get_token_issuer(settings: Optional[Settings] = None) -> TokenIssuer:
    return TokenIssuer(settings or get_settings())
