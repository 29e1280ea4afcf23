"""Notes API endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.note import Note
from ..core.schemas.notes import (
    NoteCreate,
    NoteListParams,
    NoteListResponse,
    NoteResponse,
    NoteSortField,
    NoteStatusUpdate,
    NoteUpdate,
    SortOrder,
)
from ..core.services import NoteService, SharingService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id
from ..middleware.guards import require_note_access, require_note_owner

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=NoteListResponse)
async def list_notes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    q: Optional[str] = Query(None, max_length=200),
    status_filter: str = Query(
        "active", alias="status", pattern="^(active|archived|deleted|all)$"
    ),
    sort_by: NoteSortField = Query(NoteSortField.UPDATED_AT),
    order: SortOrder = Query(SortOrder.DESC),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List the caller's notes."""
    params = NoteListParams(
        page=page, limit=limit, q=q, status=status_filter, sort_by=sort_by, order=order
    )
    return await NoteService(session).list_notes(current_user_id, params)


@router.get("/shared", response_model=List[NoteResponse])
async def list_shared_with_me(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Active notes other users privately shared with the caller."""
    return await SharingService(session).list_shared_with_me(current_user_id)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new note."""
    return await NoteService(session).create_note(current_user_id, request)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note: Note = Depends(require_note_access),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a note the caller owns or has been granted."""
    return await NoteService(session).get_note(note.id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    request: NoteUpdate,
    note: Note = Depends(require_note_owner),
    session: AsyncSession = Depends(get_db_session),
):
    return await NoteService(session).update_note(note.id, request)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note: Note = Depends(require_note_owner),
    session: AsyncSession = Depends(get_db_session),
):
    """Move a note to the trash (soft delete)."""
    await NoteService(session).soft_delete(note.id)


@router.patch("/{note_id}/status", response_model=NoteResponse)
async def update_note_status(
    request: NoteStatusUpdate,
    note: Note = Depends(require_note_owner),
    session: AsyncSession = Depends(get_db_session),
):
    """Archive, restore or trash a note."""
    return await NoteService(session).set_status(note.id, request.status)


@router.delete("/{note_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note_permanently(
    note: Note = Depends(require_note_owner),
    session: AsyncSession = Depends(get_db_session),
):
    """Remove a note and its share for good."""
    await NoteService(session).delete_permanently(note.id)
