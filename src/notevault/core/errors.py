"""
Application error taxonomy.

Every failure the services raise is an ``AppError`` carrying an
``ErrorKind``. The HTTP boundary (``core.error_handlers``) maps the kind
to a status code, so services never deal with HTTP themselves.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Closed set of error categories."""

    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    AUTHENTICATION = "authentication"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    DATABASE = "database"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.DATABASE: 500,
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    """Base error with a kind, a stable code and optional details."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details
        self._status_code = status_code
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        if self._status_code is not None:
            return self._status_code
        return STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(code={self.code!r}, message={self.message!r})>"


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION
    default_code = "VALIDATION_ERROR"
    default_message = "Invalid request data"


class BadRequestError(AppError):
    kind = ErrorKind.BAD_REQUEST
    default_code = "BAD_REQUEST"
    default_message = "Bad request"


class AuthenticationError(AppError):
    kind = ErrorKind.AUTHENTICATION
    default_code = "AUTHENTICATION_FAILED"
    default_message = "Authentication failed"


class TokenExpiredError(AuthenticationError):
    default_code = "TOKEN_EXPIRED"
    default_message = "Token has expired"


class TokenInvalidError(AuthenticationError):
    default_code = "TOKEN_INVALID"
    default_message = "Token is invalid"


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN
    default_code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    default_code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT
    default_code = "CONFLICT"
    default_message = "Resource already exists"


class RateLimitError(AppError):
    kind = ErrorKind.RATE_LIMITED
    default_code = "RATE_LIMITED"
    default_message = "Too many requests, please try again later"


class DatabaseError(AppError):
    kind = ErrorKind.DATABASE
    default_code = "DATABASE_ERROR"
    default_message = "Database operation failed"


class ConfigurationError(AppError):
    kind = ErrorKind.CONFIGURATION
    default_code = "CONFIGURATION_ERROR"
    default_message = "Server is misconfigured"


class InternalError(AppError):
    kind = ErrorKind.INTERNAL


class StorageError(InternalError):
    """Attachment storage failed to store or remove a file."""

    default_code = "STORAGE_ERROR"
    default_message = "Attachment storage is unavailable"
