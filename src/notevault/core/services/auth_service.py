"""Authentication and session management service."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ...security import PasswordHasher, TokenIssuer, get_password_hasher, get_token_issuer
from ..errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
)
from ..logging import get_logger
from ..repositories.refresh_token_repository import RefreshTokenRepository
from ..repositories.user_repository import UserRepository
from ..schemas.auth import (
    AccessTokenResponse,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    SessionTokens,
    UsernameChangeRequest,
    UsernameChangeResponse,
    UserResponse,
)
from .base import BaseService
from .interfaces import IAuthService

logger = get_logger("auth")

INVALID_CREDENTIALS = "Invalid email or password"
REGISTER_CONFLICT_STATUS = 400
# stands in for a stored salt so unknown emails cost the same HMAC as known ones
_DUMMY_SALT = "0" * 32


def _refresh_rejected(reason: str) -> AuthenticationError:
    logger.warning("Refresh rejected", extra={"reason": reason})
    return AuthenticationError(
        "Invalid or expired refresh token", code="REFRESH_TOKEN_INVALID", status_code=403
    )


class AuthService(BaseService, IAuthService):
    """Register, login, refresh, logout and account changes.

    Each successful register/login stores one hashed refresh token for the
    caller's device. Refresh validates against that record and issues
    only a new access token; the stored record is kept as is.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Optional[Settings] = None,
        hasher: Optional[PasswordHasher] = None,
        issuer: Optional[TokenIssuer] = None,
    ):
        super().__init__(session)
        self.settings = settings or get_settings()
        self.user_repo = UserRepository(session)
        self.token_repo = RefreshTokenRepository(session)
        self.hasher = hasher or get_password_hasher(self.settings)
        self.issuer = issuer or get_token_issuer(self.settings)

    def _issue_access(self, user) -> str:
        return self.issuer.issue_access(user.id, {"email": user.email})

    async def _start_session(self, user, device: str) -> SessionTokens:
        access_token = self._issue_access(user)
        refresh_token = self.issuer.issue_refresh(user.id)
        await self.token_repo.create_token(
            user.id, self.issuer.storage_form(refresh_token), device
        )
        return SessionTokens(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.settings.access_token_expire_minutes * 60,
            user=UserResponse.model_validate(user),
        )

    async def register(self, request: RegisterRequest, device: str) -> SessionTokens:
        """Create the account and log it in on ``device``.

        Taken emails and usernames are conflicts answered with 400 on signup.
        """
        if await self.user_repo.is_email_taken(request.email):
            raise ConflictError(
                "Email already registered", code="EMAIL_TAKEN", status_code=REGISTER_CONFLICT_STATUS
            )
        if await self.user_repo.is_username_taken(request.username):
            raise ConflictError(
                "Username already taken", code="USERNAME_TAKEN", status_code=REGISTER_CONFLICT_STATUS
            )

        password_hash, salt = self.hasher.hash_new(request.password)
        async with self.transaction(
            "Email or username already taken", conflict_status=REGISTER_CONFLICT_STATUS
        ):
            user = await self.user_repo.create_user(
                {
                    "username": request.username,
                    "email": request.email.lower(),
                    "password_hash": password_hash,
                    "password_salt": salt,
                }
            )
            tokens = await self._start_session(user, device)

        logger.info("User registered", extra={"user_id": str(user.id), "device": device})
        return tokens

    async def login(self, request: LoginRequest, device: str) -> SessionTokens:
        """Authenticate by email/password; other devices stay logged in."""
        user = await self.user_repo.get_by_email(request.email)
        if user is None:
            self.hasher.hash(request.password, _DUMMY_SALT)
            logger.info("Login failed", extra={"reason": "unknown_email"})
            raise AuthenticationError(INVALID_CREDENTIALS, code="INVALID_CREDENTIALS")
        if not self.hasher.verify(request.password, user.password_salt, user.password_hash):
            logger.info("Login failed", extra={"reason": "bad_password", "user_id": str(user.id)})
            raise AuthenticationError(INVALID_CREDENTIALS, code="INVALID_CREDENTIALS")

        async with self.transaction():
            tokens = await self._start_session(user, device)

        logger.info("User logged in", extra={"user_id": str(user.id), "device": device})
        return tokens

    async def refresh(self, raw_token: Optional[str], device: str) -> AccessTokenResponse:
        """New access token for a stored, valid refresh token on the same device."""
        if not raw_token:
            raise _refresh_rejected("missing")
        try:
            claims = self.issuer.verify_refresh(raw_token)
        except AuthenticationError as exc:
            raise _refresh_rejected(exc.code) from exc

        user_id = claims["sub"]
        record = await self.token_repo.find_token(
            user_id, self.issuer.storage_form(raw_token), device
        )
        if record is None:
            raise _refresh_rejected("no_matching_record")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise _refresh_rejected("unknown_user")

        return AccessTokenResponse(
            access_token=self._issue_access(user),
            expires_in=self.settings.access_token_expire_minutes * 60,
        )

    async def logout(self, user_id: UUID, raw_token: Optional[str]) -> int:
        """Revoke the refresh token presented by this client, if any."""
        if not raw_token:
            return 0
        async with self.transaction():
            removed = await self.token_repo.delete_token(
                user_id, self.issuer.storage_form(raw_token)
            )
        logger.info("User logged out", extra={"user_id": str(user_id), "revoked": removed})
        return removed

    async def _get_user(self, user_id: UUID):
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return user

    async def get_current_user(self, user_id: UUID) -> UserResponse:
        return UserResponse.model_validate(await self._get_user(user_id))

    async def change_password(self, user_id: UUID, request: PasswordChangeRequest) -> int:
        """Set a new password and revoke every refresh token of the user.

        Access tokens already issued stay valid until they expire.
        """
        user = await self._get_user(user_id)
        if not self.hasher.verify(request.current_password, user.password_salt, user.password_hash):
            raise BadRequestError("Current password is incorrect", code="INVALID_PASSWORD")

        password_hash, salt = self.hasher.hash_new(request.new_password)
        async with self.transaction():
            await self.user_repo.update_user(
                user, {"password_hash": password_hash, "password_salt": salt}
            )
            revoked = await self.token_repo.delete_user_tokens(user_id)

        logger.info("Password changed", extra={"user_id": str(user_id), "revoked_sessions": revoked})
        return revoked

    async def change_username(
        self, user_id: UUID, request: UsernameChangeRequest
    ) -> UsernameChangeResponse:
        user = await self._get_user(user_id)
        if not self.hasher.verify(request.password, user.password_salt, user.password_hash):
            raise BadRequestError("Password is incorrect", code="INVALID_PASSWORD")

        if request.new_username != user.username:
            if await self.user_repo.is_username_taken(request.new_username, exclude_user_id=user_id):
                raise ConflictError("Username already taken", code="USERNAME_TAKEN")
            async with self.transaction("Username already taken"):
                await self.user_repo.update_user(user, {"username": request.new_username})
            logger.info("Username changed", extra={"user_id": str(user_id)})

        return UsernameChangeResponse(username=user.username)
