"""Security utilities."""

from .jwt import TokenIssuer, get_token_issuer
from .password import PasswordHasher, generate_salt, get_password_hasher

__all__ = [
    "PasswordHasher",
    "generate_salt",
    "get_password_hasher",
    "TokenIssuer",
    "get_token_issuer",
]
