"""Attachment API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.models.note import Note
from ..core.schemas.attachments import AttachmentResponse
from ..core.services import AttachmentService
from ..core.storage import AttachmentStorage, get_attachment_storage
from ..database import get_db_session
from ..middleware.guards import require_note_access, require_note_owner

router = APIRouter(prefix="/notes/{note_id}/attachments", tags=["attachments"])


def get_attachment_service(
    session: AsyncSession = Depends(get_db_session),
    storage: AttachmentStorage = Depends(get_attachment_storage),
    settings: Settings = Depends(get_settings),
) -> AttachmentService:
    return AttachmentService(session, storage, settings)


@router.post("", response_model=AttachmentResponse, status_code=status.HTTP_201_CREATED)
async def upload_attachment(
    file: UploadFile = File(...),
    note: Note = Depends(require_note_owner),
    service: AttachmentService = Depends(get_attachment_service),
):
    """Attach a file to the caller's note."""
    # one byte past the limit is enough to reject the upload
    data = await file.read(service.settings.max_attachment_bytes + 1)
    return await service.upload(note.id, file.filename, file.content_type, data)


@router.get("", response_model=List[AttachmentResponse])
async def list_attachments(
    note: Note = Depends(require_note_access),
    service: AttachmentService = Depends(get_attachment_service),
):
    """Attachments of a note the caller owns or has been granted, newest first."""
    return await service.list_attachments(note.id)


@router.delete("/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment(
    attachment_id: UUID,
    note: Note = Depends(require_note_owner),
    service: AttachmentService = Depends(get_attachment_service),
):
    await service.delete_attachment(note.id, attachment_id)
