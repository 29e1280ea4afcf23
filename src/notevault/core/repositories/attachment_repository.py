"""Attachment metadata repository."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.attachment import NoteAttachment


class AttachmentRepository:
    """Rows of ``notes_attachments``; the files themselves live in storage."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_attachment(self, attachment_data: dict) -> NoteAttachment:
        attachment = NoteAttachment(**attachment_data)
        self.session.add(attachment)
        await self.session.flush()
        return attachment

    async def list_for_note(self, note_id: UUID) -> List[NoteAttachment]:
        """Newest upload first."""
        stmt = (
            select(NoteAttachment)
            .where(NoteAttachment.note_id == note_id)
            .order_by(NoteAttachment.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def get_for_note(self, attachment_id: UUID, note_id: UUID) -> Optional[NoteAttachment]:
        stmt = select(NoteAttachment).where(
            and_(NoteAttachment.id == attachment_id, NoteAttachment.note_id == note_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_attachment(self, attachment_id: UUID) -> int:
        stmt = delete(NoteAttachment).where(NoteAttachment.id == attachment_id)
        result = await self.session.execute(stmt)
        return result.rowcount
