"""Per-route note guards.

Routes declare one of these as a dependency; FastAPI resolves it before
the route body, so handlers only run once authorization holds.
"""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.note import Note
from ..core.services.access_guard import AccessGuard
from ..database import get_db_session
from .auth import get_current_user_id


async def require_note_owner(
    note_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> Note:
    """404 when the note is missing, 403 when the caller does not own it."""
    return await AccessGuard(session).require_owner(note_id, user_id)


async def require_note_access(
    note_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> Note:
    """404 when the note is missing, 403 when it is neither owned nor shared with the caller."""
    return await AccessGuard(session).require_access(note_id, user_id)
