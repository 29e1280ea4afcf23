"""Password hashing utilities.

Passwords are stored as ``HMAC-SHA256(secret, password || salt)`` in hex,
next to a per-user random salt.
"""

import hashlib
import hmac
import secrets
from typing import Optional

from ..config import Settings, get_settings
from ..core.errors import ConfigurationError

SALT_BYTES = 16


def generate_salt() -> str:
    """Return 16 random bytes, hex-encoded."""
    return secrets.token_hex(SALT_BYTES)


class PasswordHasher:
    """Keyed password hasher bound to the server-side secret."""

    def __init__(self, secret: Optional[str]):
        if not secret:
            raise ConfigurationError("PASSWORD_HASH_SECRET is not configured")
        self._key = secret.encode("utf-8")

    def hash(self, password: str, salt: str) -> str:
        message = (password + salt).encode("utf-8")
        return hmac.new(self._key, message, hashlib.sha256).hexdigest()

    def verify(self, password: str, salt: str, digest: str) -> bool:
        return hmac.compare_digest(self.hash(password, salt), digest)

    def hash_new(self, password: str) -> tuple[str, str]:
        """Hash with a fresh salt, returning ``(digest, salt)``."""
        salt = generate_salt()
        return self.hash(password, salt), salt


def get_password_hasher(settings: Optional[Settings] = None) -> PasswordHasher:
    settings = settings or get_settings()
    return PasswordHasher(settings.password_hash_secret)
