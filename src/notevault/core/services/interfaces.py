"""
Service interfaces.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..models.note import Note, NoteStatus
from ..schemas.attachments import AttachmentResponse
from ..schemas.auth import (
    AccessTokenResponse,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    SessionTokens,
    UsernameChangeRequest,
    UsernameChangeResponse,
    UserResponse,
)
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import NoteCreate, NoteListParams, NoteListResponse, NoteResponse, NoteUpdate
from ..schemas.sharing import (
    PublicShareResponse,
    ShareStatusResponse,
    ShareUpsertRequest,
    ShareUpsertResponse,
)


class IAuthService(ABC):
    """Accounts and refresh-token sessions."""

    @abstractmethod
    async def register(self, request: RegisterRequest, device: str) -> SessionTokens:
        """Create user and start a session on ``device``."""

    @abstractmethod
    async def login(self, request: LoginRequest, device: str) -> SessionTokens:
        """Start an additional session on ``device``."""

    @abstractmethod
    async def refresh(self, raw_token: Optional[str], device: str) -> AccessTokenResponse:
        """Issue a new access token from a stored refresh token."""

    @abstractmethod
    async def logout(self, user_id: UUID, raw_token: Optional[str]) -> int:
        """Revoke the presented refresh token."""

    @abstractmethod
    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""

    @abstractmethod
    async def change_password(self, user_id: UUID, request: PasswordChangeRequest) -> int:
        """Change password, revoking all refresh tokens."""

    @abstractmethod
    async def change_username(
        self, user_id: UUID, request: UsernameChangeRequest
    ) -> UsernameChangeResponse:
        """Change username after re-checking the password."""


class IAccessGuard(ABC):
    """Ownership and access decisions."""

    @abstractmethod
    async def is_owner(self, note_id: UUID, user_id: Optional[UUID]) -> bool:
        pass

    @abstractmethod
    async def has_access(self, note_id: UUID, user_id: Optional[UUID]) -> bool:
        pass

    @abstractmethod
    async def require_owner(self, note_id: UUID, user_id: UUID) -> Note:
        pass

    @abstractmethod
    async def require_access(self, note_id: UUID, user_id: Optional[UUID]) -> Note:
        pass


class INoteService(ABC):
    """Note CRUD."""

    @abstractmethod
    async def list_notes(self, user_id: UUID, params: NoteListParams) -> NoteListResponse:
        pass

    @abstractmethod
    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        pass

    @abstractmethod
    async def get_note(self, note_id: UUID) -> NoteResponse:
        pass

    @abstractmethod
    async def update_note(self, note_id: UUID, request: NoteUpdate) -> NoteResponse:
        pass

    @abstractmethod
    async def set_status(self, note_id: UUID, status: NoteStatus) -> NoteResponse:
        pass

    @abstractmethod
    async def soft_delete(self, note_id: UUID) -> None:
        pass

    @abstractmethod
    async def delete_permanently(self, note_id: UUID) -> None:
        pass


class ISharingService(ABC):
    """Note sharing service."""

    @abstractmethod
    async def get_share_status(self, note_id: UUID) -> ShareStatusResponse:
        pass

    @abstractmethod
    async def upsert_share(self, note_id: UUID, request: ShareUpsertRequest) -> ShareUpsertResponse:
        pass

    @abstractmethod
    async def get_by_public_id(
        self, public_id: str, caller_id: Optional[UUID]
    ) -> PublicShareResponse:
        pass

    @abstractmethod
    async def remove_assignment(self, note_id: UUID, target_user_id: UUID) -> None:
        pass

    @abstractmethod
    async def remove_share(self, note_id: UUID) -> None:
        pass

    @abstractmethod
    async def list_shared_with_me(self, user_id: UUID) -> List[NoteResponse]:
        pass


class IAttachmentService(ABC):
    """Files attached to notes."""

    @abstractmethod
    async def upload(
        self, note_id: UUID, filename: Optional[str], content_type: Optional[str], data: bytes
    ) -> AttachmentResponse:
        """Validate, store and record an uploaded file."""

    @abstractmethod
    async def list_attachments(self, note_id: UUID) -> List[AttachmentResponse]:
        pass

    @abstractmethod
    async def delete_attachment(self, note_id: UUID, attachment_id: UUID) -> None:
        """Remove the stored file and its record."""

class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""
