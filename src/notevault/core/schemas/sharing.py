"""
Note sharing schemas.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..models.share import ShareType
from .notes import NoteResponse


class ShareUpsertRequest(BaseModel):
    """Create or update the share session of a note."""

    share_type: ShareType = Field(default=ShareType.PUBLIC)
    expires_at: Optional[datetime] = Field(default=None, description="Must be in the future")
    user_emails: List[EmailStr] = Field(default_factory=list, max_length=100)

    @field_validator("expires_at")
    @classmethod
    def validate_expires_at(cls, v):
        if v is None:
            return v
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        if v <= datetime.now(timezone.utc):
            raise ValueError("Expiry date must be in the future")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "share_type": "private",
                "expires_at": "2030-01-01T00:00:00Z",
                "user_emails": ["friend@example.com"],
            }
        }
    )


class SharedUser(BaseModel):
    id: uuid.UUID
    email: str
    username: str

    model_config = ConfigDict(from_attributes=True)


class ShareStatusResponse(BaseModel):
    """Share state of a note; ``share_type`` is null when the note is not shared."""

    id: Optional[uuid.UUID] = None
    note_id: Optional[uuid.UUID] = None
    public_id: Optional[str] = None
    share_type: Optional[ShareType] = None
    expires_at: Optional[datetime] = None
    is_expired: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    shared_users: List[SharedUser] = Field(default_factory=list)


class ShareUpsertResponse(ShareStatusResponse):
    share_url: str
    skipped_emails: List[str] = Field(default_factory=list)


class PublicShareResponse(NoteResponse):
    """A note reached through its share link."""

    share_type: ShareType
    expires_at: Optional[datetime] = None
