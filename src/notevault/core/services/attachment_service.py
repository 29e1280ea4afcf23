"""Attachment service implementation.

Like the note CRUD, these methods assume the route guard already decided
who may call them: uploads and removals are owner-only, listing needs
access to the note.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ..errors import AppError, NotFoundError, ValidationError
from ..logging import get_logger
from ..repositories.attachment_repository import AttachmentRepository
from ..schemas.attachments import MIME_TYPE_PATTERN, AttachmentResponse
from ..storage import AttachmentStorage
from .base import BaseService
from .interfaces import IAttachmentService

logger = get_logger("attachments")


class AttachmentService(BaseService, IAttachmentService):
    """Keeps attachment rows and stored files in step."""

    def __init__(
        self,
        session: AsyncSession,
        storage: AttachmentStorage,
        settings: Optional[Settings] = None,
    ):
        super().__init__(session)
        self.storage = storage
        self.settings = settings or get_settings()
        self.attachment_repo = AttachmentRepository(session)

    def _check_upload(self, filename: Optional[str], content_type: Optional[str], size: int) -> None:
        if not filename:
            raise ValidationError("File is required", code="FILE_REQUIRED")
        if not content_type or not MIME_TYPE_PATTERN.match(content_type):
            raise ValidationError(
                "Invalid file type", code="INVALID_FILE_TYPE", details={"mime_type": content_type}
            )
        limit = self.settings.max_attachment_bytes
        if size > limit:
            raise ValidationError(
                "File is too large", code="FILE_TOO_LARGE", details={"max_bytes": limit}
            )

    async def upload(
        self, note_id: UUID, filename: Optional[str], content_type: Optional[str], data: bytes
    ) -> AttachmentResponse:
        """Store the file, then record it; the file is removed again if recording fails."""
        self._check_upload(filename, content_type, len(data))

        file_url = await self.storage.save(data, filename, content_type)
        try:
            async with self.transaction():
                attachment = await self.attachment_repo.create_attachment(
                    {
                        "note_id": note_id,
                        "file_url": file_url,
                        "file_name": filename[:255],
                        "file_mime_type": content_type,
                        "file_size": len(data),
                    }
                )
        except AppError:
            await self.storage.delete(file_url)
            raise

        logger.info(
            "Attachment uploaded",
            extra={"note_id": str(note_id), "attachment_id": str(attachment.id), "size": len(data)},
        )
        return AttachmentResponse.model_validate(attachment)

    async def list_attachments(self, note_id: UUID) -> List[AttachmentResponse]:
        attachments = await self.attachment_repo.list_for_note(note_id)
        return [AttachmentResponse.model_validate(a) for a in attachments]

    async def delete_attachment(self, note_id: UUID, attachment_id: UUID) -> None:
        attachment = await self.attachment_repo.get_for_note(attachment_id, note_id)
        if attachment is None:
            raise NotFoundError("Attachment not found", code="ATTACHMENT_NOT_FOUND")

        await self.storage.delete(attachment.file_url)
        async with self.transaction():
            await self.attachment_repo.delete_attachment(attachment.id)
        logger.info(
            "Attachment removed",
            extra={"note_id": str(note_id), "attachment_id": str(attachment_id)},
        )
