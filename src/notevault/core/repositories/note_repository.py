"""Note repository for database operations."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, asc, delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note, NoteStatus
from ..models.share import ShareAssignment, ShareSession, ShareType

SORTABLE_COLUMNS = {
    "created_at": Note.created_at,
    "updated_at": Note.updated_at,
    "title": Note.title,
}


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        note = Note(**note_data)
        self.session.add(note)
        await self.session.flush()
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID, owner eagerly joined."""
        stmt = (
            select(Note)
            .where(Note.id == note_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def update_note(self, note: Note, update_data: dict) -> Note:
        for key, value in update_data.items():
            setattr(note, key, value)
        await self.session.flush()
        return note

    async def delete_note(self, note_id: UUID) -> bool:
        """Hard delete; the share session and assignments cascade in the DB."""
        stmt = delete(Note).where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def list_user_notes(
        self,
        user_id: UUID,
        page: int = 1,
        per_page: int = 10,
        query: Optional[str] = None,
        status: Optional[str] = NoteStatus.ACTIVE.value,
        sort_by: str = "updated_at",
        order: str = "desc",
    ) -> tuple[List[Note], int]:
        """List a user's notes with paging, text filter and sorting.

        ``status=None`` lists every status.
        """
        conditions = [Note.user_id == user_id]
        if status:
            conditions.append(Note.status == status)
        if query and query.strip():
            pattern = f"%{query.strip().lower()}%"
            conditions.append(
                or_(func.lower(Note.title).like(pattern), func.lower(Note.content).like(pattern))
            )

        count_stmt = select(func.count(Note.id)).where(and_(*conditions))
        total = (await self.session.execute(count_stmt)).scalar_one()

        column = SORTABLE_COLUMNS.get(sort_by, Note.updated_at)
        direction = asc if order == "asc" else desc
        stmt = (
            select(Note)
            .where(and_(*conditions))
            .order_by(direction(column), desc(Note.id))
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.unique().scalars()), total

    async def list_shared_with_user(self, user_id: UUID, now: datetime) -> List[Note]:
        """Active notes of other owners privately shared with ``user_id``."""
        stmt = (
            select(Note)
            .join(ShareSession, ShareSession.note_id == Note.id)
            .join(ShareAssignment, ShareAssignment.share_session_id == ShareSession.id)
            .where(
                ShareAssignment.user_id == user_id,
                ShareSession.share_type == ShareType.PRIVATE.value,
                or_(ShareSession.expires_at.is_(None), ShareSession.expires_at > now),
                Note.status == NoteStatus.ACTIVE.value,
                Note.user_id != user_id,
            )
            .order_by(desc(Note.updated_at))
        )
        result = await self.session.execute(stmt)
        return list(result.unique().scalars())
