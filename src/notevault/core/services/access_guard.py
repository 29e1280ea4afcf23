"""Ownership and access decisions for notes."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ForbiddenError, NotFoundError
from ..models.note import Note
from ..models.share import ShareSession
from ..repositories.note_repository import NoteRepository
from ..repositories.share_repository import ShareRepository
from .interfaces import IAccessGuard


class AccessGuard(IAccessGuard):
    """Resolves who may act on a note.

    A note's access is exactly one of: owner only, public share, private
    share to a set of users, or nobody but the owner. Expired sessions
    and sessions on non-active notes grant nothing.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.share_repo = ShareRepository(session)

    async def _get_note(self, note_id: UUID) -> Note:
        note = await self.note_repo.get_by_id(note_id)
        if note is None:
            raise NotFoundError("Note not found", code="NOTE_NOT_FOUND")
        return note

    async def is_owner(self, note_id: UUID, user_id: Optional[UUID]) -> bool:
        note = await self._get_note(note_id)
        return note.is_owned_by(user_id)

    async def session_grants(
        self, share: Optional[ShareSession], note: Note, user_id: Optional[UUID]
    ) -> bool:
        """Whether ``share`` admits a non-owner ``user_id`` (None = anonymous)."""
        if share is None or not note.is_active:
            return False
        if share.is_expired(datetime.now(timezone.utc)):
            return False
        if share.is_public:
            return True
        if user_id is None:
            return False
        return await self.share_repo.has_assignment(share.id, user_id)

    async def has_access(self, note_id: UUID, user_id: Optional[UUID]) -> bool:
        note = await self._get_note(note_id)
        if note.is_owned_by(user_id):
            return True
        share = await self.share_repo.get_by_note_id(note_id)
        return await self.session_grants(share, note, user_id)

    async def require_owner(self, note_id: UUID, user_id: UUID) -> Note:
        """The note, or NotFound / Forbidden."""
        note = await self._get_note(note_id)
        if not note.is_owned_by(user_id):
            raise ForbiddenError("Only the note owner can do this", code="NOT_NOTE_OWNER")
        return note

    async def require_access(self, note_id: UUID, user_id: Optional[UUID]) -> Note:
        note = await self._get_note(note_id)
        if note.is_owned_by(user_id):
            return note
        share = await self.share_repo.get_by_note_id(note_id)
        if not await self.session_grants(share, note, user_id):
            raise ForbiddenError("You do not have access to this note", code="NOTE_ACCESS_DENIED")
        return note
