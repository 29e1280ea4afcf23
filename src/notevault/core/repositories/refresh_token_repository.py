"""Refresh token repository for database operations."""

from typing import Optional
from uuid import UUID

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.refresh_token import RefreshToken


class RefreshTokenRepository:
    """Stores and revokes hashed refresh tokens."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_token(self, user_id: UUID, token_hash: str, device: str) -> RefreshToken:
        token = RefreshToken(user_id=user_id, token_hash=token_hash, device=device)
        self.session.add(token)
        await self.session.flush()
        return token

    async def find_token(self, user_id: UUID, token_hash: str, device: str) -> Optional[RefreshToken]:
        """Exact (user, hash, device) match, used to validate a refresh."""
        stmt = (
            select(RefreshToken)
            .where(
                and_(
                    RefreshToken.user_id == user_id,
                    RefreshToken.token_hash == token_hash,
                    RefreshToken.device == device,
                )
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def delete_token(self, user_id: UUID, token_hash: str) -> int:
        """Delete the record(s) of one issued token."""
        stmt = delete(RefreshToken).where(
            and_(RefreshToken.user_id == user_id, RefreshToken.token_hash == token_hash)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_user_tokens(self, user_id: UUID) -> int:
        """Delete all refresh tokens for user."""
        stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.rowcount
