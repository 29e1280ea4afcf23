"""Sharing service implementation."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import BadRequestError, NotFoundError
from ..logging import get_logger
from ..models.share import ShareSession, ShareType
from ..repositories.note_repository import NoteRepository
from ..repositories.share_repository import ShareRepository
from ..repositories.user_repository import UserRepository
from ..schemas.notes import NoteResponse
from ..schemas.sharing import (
    PublicShareResponse,
    SharedUser,
    ShareStatusResponse,
    ShareUpsertRequest,
    ShareUpsertResponse,
)
from .access_guard import AccessGuard
from .base import BaseService
from .interfaces import ISharingService

logger = get_logger("sharing")


def share_url(public_id: str) -> str:
    return f"/share/{public_id}"


def _dedupe_emails(emails) -> List[str]:
    """Lower-cased emails in first-seen order, duplicates dropped."""
    seen: dict[str, None] = {}
    for email in emails:
        seen.setdefault(str(email).strip().lower(), None)
    return list(seen)


class SharingService(BaseService, ISharingService):
    """Manages the single share session of a note.

    Owner checks happen at the route (``require_note_owner``); the methods
    here assume the caller owns ``note_id`` unless stated otherwise.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.note_repo = NoteRepository(session)
        self.share_repo = ShareRepository(session)
        self.user_repo = UserRepository(session)
        self.guard = AccessGuard(session)

    async def _status_of(self, share: ShareSession) -> ShareStatusResponse:
        users = []
        if share.is_private:
            users = await self.share_repo.list_assigned_users(share.id)
        return ShareStatusResponse(
            id=share.id,
            note_id=share.note_id,
            public_id=share.public_id,
            share_type=share.share_type,
            expires_at=share.expires_at,
            is_expired=share.is_expired(),
            created_at=share.created_at,
            updated_at=share.updated_at,
            shared_users=[SharedUser.model_validate(u) for u in users],
        )

    async def get_share_status(self, note_id: UUID) -> ShareStatusResponse:
        """Current share session, or the empty "not shared" status."""
        share = await self.share_repo.get_by_note_id(note_id)
        if share is None:
            return ShareStatusResponse()
        return await self._status_of(share)

    async def upsert_share(self, note_id: UUID, request: ShareUpsertRequest) -> ShareUpsertResponse:
        """Create or update the note's share session in one transaction.

        A private share replaces its whole assignment set with the users
        found for ``user_emails``; unknown emails (and the owner's own) are
        reported in ``skipped_emails``. A public share drops assignments.
        """
        note = await self.note_repo.get_by_id(note_id)
        if note is None:
            raise NotFoundError("Note not found", code="NOTE_NOT_FOUND")
        if not note.is_active:
            raise BadRequestError("Only active notes can be shared", code="NOTE_NOT_ACTIVE")

        share_type = ShareType(request.share_type).value
        requested = _dedupe_emails(request.user_emails) if share_type == ShareType.PRIVATE.value else []
        skipped: List[str] = []

        async with self.transaction("Note share was modified concurrently"):
            share = await self.share_repo.get_by_note_id(note_id)
            if share is None:
                share = await self.share_repo.create_session(note_id, share_type, request.expires_at)
                created = True
            else:
                share = await self.share_repo.update_session(share, share_type, request.expires_at)
                created = False

            await self.share_repo.clear_assignments(share.id)
            if requested:
                found = {
                    user.email.lower(): user
                    for user in await self.user_repo.get_by_emails(requested)
                    if user.id != note.user_id
                }
                await self.share_repo.add_assignments(share.id, [u.id for u in found.values()])
                skipped = [email for email in requested if email not in found]

            status = await self._status_of(share)

        logger.info(
            "Share upserted",
            extra={
                "note_id": str(note_id),
                "share_type": share_type,
                "share_created": created,
                "assigned": len(status.shared_users),
                "skipped": len(skipped),
            },
        )
        return ShareUpsertResponse(
            **status.model_dump(),
            share_url=share_url(share.public_id),
            skipped_emails=skipped,
        )

    async def get_by_public_id(
        self, public_id: str, caller_id: Optional[UUID]
    ) -> PublicShareResponse:
        """Resolve a share link. Every denial looks like a missing share."""
        share = await self.share_repo.get_by_public_id(public_id)
        if share is None:
            raise NotFoundError("Shared note not found or access denied", code="SHARE_NOT_FOUND")

        note = share.note
        # share links resolve the same way for the owner as for anyone else
        if not await self.guard.session_grants(share, note, caller_id):
            raise NotFoundError("Shared note not found or access denied", code="SHARE_NOT_FOUND")

        return PublicShareResponse(
            **NoteResponse.from_note(note).model_dump(),
            share_type=share.share_type,
            expires_at=share.expires_at,
        )

    async def remove_assignment(self, note_id: UUID, target_user_id: UUID) -> None:
        share = await self.share_repo.get_by_note_id(note_id)
        if share is None:
            raise NotFoundError("Share session not found", code="SHARE_NOT_FOUND")
        if not share.is_private:
            raise BadRequestError(
                "Users can only be removed from private shares", code="SHARE_NOT_PRIVATE"
            )
        async with self.transaction():
            removed = await self.share_repo.delete_assignment(share.id, target_user_id)
            if not removed:
                raise NotFoundError(
                    "User is not assigned to this share", code="ASSIGNMENT_NOT_FOUND"
                )
        logger.info(
            "Share assignment removed",
            extra={"note_id": str(note_id), "target_user_id": str(target_user_id)},
        )

    async def remove_share(self, note_id: UUID) -> None:
        """Stop sharing; assignments go with the session. Idempotent."""
        async with self.transaction():
            removed = await self.share_repo.delete_session(note_id)
        if removed:
            logger.info("Share removed", extra={"note_id": str(note_id)})

    async def list_shared_with_me(self, user_id: UUID) -> List[NoteResponse]:
        notes = await self.note_repo.list_shared_with_user(user_id, datetime.now(timezone.utc))
        return [NoteResponse.from_note(note) for note in notes]
