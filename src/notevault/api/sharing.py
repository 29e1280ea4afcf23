"""Sharing API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.note import Note
from ..core.schemas.sharing import (
    PublicShareResponse,
    ShareStatusResponse,
    ShareUpsertRequest,
    ShareUpsertResponse,
)
from ..core.services import SharingService
from ..database import get_db_session
from ..middleware.auth import get_optional_user_id
from ..middleware.guards import require_note_owner

router = APIRouter(tags=["sharing"])


@router.get("/notes/{note_id}/share", response_model=ShareStatusResponse)
async def get_share_status(
    note: Note = Depends(require_note_owner),
    session: AsyncSession = Depends(get_db_session),
):
    """Current share settings of a note."""
    return await SharingService(session).get_share_status(note.id)


@router.post(
    "/notes/{note_id}/share",
    response_model=ShareUpsertResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upsert_share(
    request: ShareUpsertRequest,
    note: Note = Depends(require_note_owner),
    session: AsyncSession = Depends(get_db_session),
):
    """Create or update the note's share session."""
    return await SharingService(session).upsert_share(note.id, request)


@router.delete("/notes/{note_id}/share", status_code=status.HTTP_204_NO_CONTENT)
async def remove_share(
    note: Note = Depends(require_note_owner),
    session: AsyncSession = Depends(get_db_session),
):
    await SharingService(session).remove_share(note.id)


@router.delete(
    "/notes/{note_id}/share/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_shared_user(
    user_id: UUID,
    note: Note = Depends(require_note_owner),
    session: AsyncSession = Depends(get_db_session),
):
    """Revoke one user's access to a private share."""
    await SharingService(session).remove_assignment(note.id, user_id)


@router.get("/share/{public_id}", response_model=PublicShareResponse)
async def get_shared_note(
    public_id: str = Path(min_length=1, max_length=36),
    caller_id: Optional[UUID] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Open a share link; private links need an assigned, logged-in caller."""
    return await SharingService(session).get_by_public_id(public_id, caller_id)
