"""
Database models.

Models included:
    - User: account with keyed password hash and salt
    - RefreshToken: hashed refresh token bound to a device label
    - Note: owner content with active/archived/deleted lifecycle
    - ShareSession: at most one per note, public or private
    - ShareAssignment: user granted access to a private share session
    - NoteAttachment: uploaded file metadata, bytes kept in attachment storage
"""

from .attachment import NoteAttachment
from .base import BaseModel
from .note import Note, NoteStatus
from .refresh_token import RefreshToken
from .share import ShareAssignment, ShareSession, ShareType
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "RefreshToken",
    "Note",
    "NoteStatus",
    "ShareSession",
    "ShareAssignment",
    "ShareType",
    "NoteAttachment",
]
