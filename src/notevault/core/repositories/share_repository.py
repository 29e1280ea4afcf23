"""Share session repository for database operations."""

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.share import ShareAssignment, ShareSession, new_public_id
from ..models.user import User


class ShareRepository:
    """Repository for share sessions and their assignments."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_note_id(self, note_id: UUID) -> Optional[ShareSession]:
        stmt = select(ShareSession).where(ShareSession.note_id == note_id).execution_options(
            populate_existing=True
        )
        result = await self.session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def get_by_public_id(self, public_id: str) -> Optional[ShareSession]:
        """Session by its external id, note (and owner) eagerly joined."""
        stmt = select(ShareSession).where(ShareSession.public_id == public_id).execution_options(
            populate_existing=True
        )
        result = await self.session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def create_session(
        self, note_id: UUID, share_type: str, expires_at: Optional[datetime]
    ) -> ShareSession:
        share = ShareSession(
            note_id=note_id,
            public_id=new_public_id(),
            share_type=share_type,
            expires_at=expires_at,
        )
        self.session.add(share)
        await self.session.flush()
        return share

    async def update_session(
        self, share: ShareSession, share_type: str, expires_at: Optional[datetime]
    ) -> ShareSession:
        share.share_type = share_type
        share.expires_at = expires_at
        await self.session.flush()
        return share

    async def delete_session(self, note_id: UUID) -> int:
        stmt = delete(ShareSession).where(ShareSession.note_id == note_id)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def clear_assignments(self, share_session_id: UUID) -> int:
        stmt = delete(ShareAssignment).where(ShareAssignment.share_session_id == share_session_id)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def add_assignments(self, share_session_id: UUID, user_ids: Iterable[UUID]) -> int:
        rows = [ShareAssignment(share_session_id=share_session_id, user_id=uid) for uid in user_ids]
        self.session.add_all(rows)
        await self.session.flush()
        return len(rows)

    async def has_assignment(self, share_session_id: UUID, user_id: UUID) -> bool:
        stmt = select(ShareAssignment.id).where(
            and_(
                ShareAssignment.share_session_id == share_session_id,
                ShareAssignment.user_id == user_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def delete_assignment(self, share_session_id: UUID, user_id: UUID) -> int:
        stmt = delete(ShareAssignment).where(
            and_(
                ShareAssignment.share_session_id == share_session_id,
                ShareAssignment.user_id == user_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def list_assigned_users(self, share_session_id: UUID) -> List[User]:
        """Users granted access to a private session, ordered by email."""
        stmt = (
            select(User)
            .join(ShareAssignment, ShareAssignment.user_id == User.id)
            .where(ShareAssignment.share_session_id == share_session_id)
            .order_by(User.email)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())
