# Note sharing: one share session per note, optional per-user assignments
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, TimestampMixin, as_utc
from .types import GUID

if TYPE_CHECKING:
    from .note import Note
    from .user import User


class ShareType(str, Enum):
    """Who a share session admits."""

    PUBLIC = "public"
    PRIVATE = "private"


def new_public_id() -> str:
    return str(uuid.uuid4())


class ShareSession(TimestampMixin, BaseModel):
    """Share state of a note, addressed externally by ``public_id``."""

    __tablename__ = "note_share_sessions"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    public_id: Mapped[str] = mapped_column(
        String(36), nullable=False, unique=True, default=new_public_id
    )
    share_type: Mapped[str] = mapped_column(
        String(10), nullable=False, default=ShareType.PUBLIC.value
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    note: Mapped["Note"] = relationship("Note", back_populates="share_session", lazy="joined")
    assignments: Mapped[List["ShareAssignment"]] = relationship(
        "ShareAssignment",
        back_populates="share_session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint("share_type IN ('public', 'private')", name="ck_share_sessions_type"),
        Index("idx_share_sessions_public_id", "public_id"),
    )

    def __repr__(self) -> str:
        return f"<ShareSession(note_id={self.note_id}, type={self.share_type})>"

    @property
    def is_public(self) -> bool:
        return self.share_type == ShareType.PUBLIC.value

    @property
    def is_private(self) -> bool:
        return self.share_type == ShareType.PRIVATE.value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """A session with ``expires_at`` at or before ``now`` behaves as absent."""
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return as_utc(self.expires_at) <= now


class ShareAssignment(BaseModel):
    """Grants one user access to a private share session."""

    __tablename__ = "note_share_session_assignments"

    share_session_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("note_share_sessions.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    share_session: Mapped["ShareSession"] = relationship(
        "ShareSession", back_populates="assignments"
    )
    user: Mapped["User"] = relationship("User", lazy="joined")

    __table_args__ = (
        UniqueConstraint("share_session_id", "user_id", name="uq_share_assignment_session_user"),
        Index("idx_share_assignments_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<ShareAssignment(session={self.share_session_id}, user={self.user_id})>"
