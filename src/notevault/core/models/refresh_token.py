# Stored refresh tokens, one row per login on a device
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .user import User


class RefreshToken(BaseModel):
    """Keyed hash of an issued refresh token, bound to a device label.

    The raw token is never stored. Several rows may exist for the same
    (user, device) pair, one per login.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    device: Mapped[str] = mapped_column(String(255), nullable=False, default="unknown")

    user: Mapped["User"] = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index("idx_refresh_tokens_user_id", "user_id"),
        Index("idx_refresh_tokens_lookup", "user_id", "token_hash"),
    )

    def __repr__(self) -> str:
        return f"<RefreshToken(user_id={self.user_id}, device={self.device!r})>"
