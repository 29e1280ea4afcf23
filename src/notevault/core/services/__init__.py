"""
Service layer interfaces and implementations.
"""

from .interfaces import (
    IAccessGuard,
    IAttachmentService,
    IAuthService,
    IHealthService,
    INoteService,
    ISharingService,
)

from .access_guard import AccessGuard
from .attachment_service import AttachmentService
from .auth_service import AuthService
from .health_service import HealthService
from .note_service import NoteService
from .sharing_service import SharingService

__all__ = [
    # Interfaces
    "IAuthService",
    "IAccessGuard",
    "INoteService",
    "ISharingService",
    "IHealthService",
    "IAttachmentService",
    # Implementations
    "AuthService",
    "AccessGuard",
    "NoteService",
    "SharingService",
    "HealthService",
    "AttachmentService",
]
