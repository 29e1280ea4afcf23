# Files attached to a note; the bytes live in attachment storage
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .note import Note


class NoteAttachment(BaseModel):
    """Metadata of one uploaded file. ``created_at`` is the upload time."""

    __tablename__ = "notes_attachments"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    file_url: Mapped[str] = mapped_column(String(500), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)

    note: Mapped["Note"] = relationship("Note", back_populates="attachments")

    __table_args__ = (Index("idx_notes_attachments_note_id", "note_id"),)

    def __repr__(self) -> str:
        return f"<NoteAttachment(note_id={self.note_id}, file_name={self.file_name!r})>"
