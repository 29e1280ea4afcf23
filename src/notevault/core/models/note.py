# Note model for user content
import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, TimestampMixin, utcnow
from .types import GUID

if TYPE_CHECKING:
    from .attachment import NoteAttachment
    from .share import ShareSession
    from .user import User


class NoteStatus(str, Enum):
    """Lifecycle states of a note."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


class Note(TimestampMixin, BaseModel):
    """Note owned by exactly one user."""

    __tablename__ = "notes"

    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(150), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=NoteStatus.ACTIVE.value)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    owner: Mapped["User"] = relationship("User", back_populates="notes", lazy="joined")
    share_session: Mapped[Optional["ShareSession"]] = relationship(
        "ShareSession",
        back_populates="note",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )
    attachments: Mapped[List["NoteAttachment"]] = relationship(
        "NoteAttachment",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'archived', 'deleted')", name="ck_notes_status"
        ),
        Index("idx_notes_user_id", "user_id"),
        Index("idx_notes_user_status", "user_id", "status"),
        Index("idx_notes_updated_at", "updated_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', user_id={self.user_id})>"

    @property
    def is_active(self) -> bool:
        return self.status == NoteStatus.ACTIVE.value

    def is_owned_by(self, user_id: Optional[uuid.UUID]) -> bool:
        return user_id is not None and self.user_id == user_id

    def set_status(self, status: NoteStatus) -> None:
        """Move to ``status``; ``deleted`` stamps ``deleted_at``, others clear it."""
        self.status = NoteStatus(status).value
        self.deleted_at = utcnow() if self.status == NoteStatus.DELETED.value else None
