"""Note service implementation.

Authorization is decided before these methods run (see the route guards);
they only perform the CRUD work.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..logging import get_logger
from ..models.note import Note, NoteStatus
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import (
    NoteCreate,
    NoteListParams,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    Pagination,
)
from .base import BaseService
from .interfaces import INoteService

logger = get_logger("notes")


class NoteService(BaseService, INoteService):
    """Note CRUD for the owner."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.note_repo = NoteRepository(session)

    async def _load(self, note_id: UUID) -> Note:
        note = await self.note_repo.get_by_id(note_id)
        if note is None:
            raise NotFoundError("Note not found", code="NOTE_NOT_FOUND")
        return note

    async def list_notes(self, user_id: UUID, params: NoteListParams) -> NoteListResponse:
        status: Optional[str] = None if params.status == "all" else params.status
        notes, total = await self.note_repo.list_user_notes(
            user_id,
            page=params.page,
            per_page=params.limit,
            query=params.q,
            status=status,
            sort_by=params.sort_by.value,
            order=params.order.value,
        )
        return NoteListResponse(
            notes=[NoteResponse.from_note(n) for n in notes],
            pagination=Pagination.create(total, params.page, params.limit),
        )

    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        async with self.transaction():
            note = await self.note_repo.create_note(
                {
                    "user_id": user_id,
                    "title": request.title,
                    "content": request.content,
                    "status": NoteStatus.ACTIVE.value,
                }
            )
        logger.info("Note created", extra={"note_id": str(note.id), "user_id": str(user_id)})
        return NoteResponse.from_note(await self._load(note.id))

    async def get_note(self, note_id: UUID) -> NoteResponse:
        return NoteResponse.from_note(await self._load(note_id))

    async def update_note(self, note_id: UUID, request: NoteUpdate) -> NoteResponse:
        note = await self._load(note_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if changes:
            async with self.transaction():
                await self.note_repo.update_note(note, changes)
        return NoteResponse.from_note(await self._load(note_id))

    async def set_status(self, note_id: UUID, status: NoteStatus) -> NoteResponse:
        """Change lifecycle status; ``deleted`` is the soft delete."""
        note = await self._load(note_id)
        async with self.transaction():
            note.set_status(status)
            await self.session.flush()
        logger.info("Note status changed", extra={"note_id": str(note_id), "status": note.status})
        return NoteResponse.from_note(await self._load(note_id))

    async def soft_delete(self, note_id: UUID) -> None:
        await self.set_status(note_id, NoteStatus.DELETED)

    async def delete_permanently(self, note_id: UUID) -> None:
        async with self.transaction():
            removed = await self.note_repo.delete_note(note_id)
        if not removed:
            raise NotFoundError("Note not found", code="NOTE_NOT_FOUND")
        logger.info("Note permanently deleted", extra={"note_id": str(note_id)})
