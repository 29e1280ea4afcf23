"""
Note management schemas.

These schemas define the API contracts for note CRUD operations and
the note list filters.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.note import NoteStatus


class NoteSortField(str, Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _clean_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Title cannot be empty")
    return v


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=150, description="Note title")
    content: str = Field(description="Note content (rich text, stored as-is)")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _clean_title(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Meeting Notes - Q4 Planning",
                "content": "<h2>Agenda</h2><p>Review Q3 performance</p>",
            }
        }
    )


class NoteUpdate(BaseModel):
    """Note update request schema."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=150)
    content: Optional[str] = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _clean_title(v)


class NoteStatusUpdate(BaseModel):
    status: NoteStatus


class NoteListParams(BaseModel):
    """Query parameters of the note list."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    q: Optional[str] = Field(default=None, max_length=200)
    status: str = Field(default=NoteStatus.ACTIVE.value, pattern="^(active|archived|deleted|all)$")
    sort_by: NoteSortField = NoteSortField.UPDATED_AT
    order: SortOrder = SortOrder.DESC


class NoteResponse(BaseModel):
    """Note response schema."""

    id: uuid.UUID
    user_id: uuid.UUID
    owner_username: Optional[str] = None
    title: str
    content: str
    status: NoteStatus
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_note(cls, note) -> "NoteResponse":
        owner = getattr(note, "owner", None)
        return cls(
            id=note.id,
            user_id=note.user_id,
            owner_username=owner.username if owner is not None else None,
            title=note.title,
            content=note.content,
            status=note.status,
            created_at=note.created_at,
            updated_at=note.updated_at,
            deleted_at=note.deleted_at,
        )


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def create(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, total_pages=(total + limit - 1) // limit)


class NoteListResponse(BaseModel):
    notes: List[NoteResponse]
    pagination: Pagination
