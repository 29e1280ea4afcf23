"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .attachments import AttachmentResponse
from .auth import (
    AccessTokenResponse,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    SessionTokens,
    TokenResponse,
    UserResponse,
    UsernameChangeRequest,
)
from .common import ErrorResponse, HealthCheckResponse
from .notes import NoteCreate, NoteListParams, NoteListResponse, NoteResponse, NoteUpdate
from .sharing import (
    PublicShareResponse,
    SharedUser,
    ShareStatusResponse,
    ShareUpsertRequest,
    ShareUpsertResponse,
)

__all__ = [
    # Auth schemas
    "RegisterRequest",
    "LoginRequest",
    "PasswordChangeRequest",
    "UsernameChangeRequest",
    "UserResponse",
    "AccessTokenResponse",
    "TokenResponse",
    "SessionTokens",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteListParams",
    "NoteListResponse",
    # Sharing schemas
    "ShareUpsertRequest",
    "ShareStatusResponse",
    "ShareUpsertResponse",
    "SharedUser",
    "PublicShareResponse",
    # Attachment schemas
    "AttachmentResponse",
    # Common schemas
    "ErrorResponse",
    "HealthCheckResponse",
]
