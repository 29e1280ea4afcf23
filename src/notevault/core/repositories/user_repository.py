"""User repository for database operations."""

from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(self, user_data: dict) -> User:
        """Add a new user; the caller commits."""
        user = User(**user_data)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_emails(self, emails: Iterable[str]) -> list[User]:
        """Users whose email matches any of ``emails`` (case-insensitive)."""
        normalized = {email.strip().lower() for email in emails}
        if not normalized:
            return []
        stmt = select(User).where(func.lower(User.email).in_(normalized))
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def update_user(self, user: User, update_data: dict) -> User:
        for key, value in update_data.items():
            setattr(user, key, value)
        await self.session.flush()
        return user

    async def is_username_taken(self, username: str, exclude_user_id: Optional[UUID] = None) -> bool:
        stmt = select(User.id).where(User.username == username)
        if exclude_user_id is not None:
            stmt = stmt.where(User.id != exclude_user_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def is_email_taken(self, email: str) -> bool:
        return await self.get_by_email(email) is not None
