"""Authentication API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.schemas.auth import (
    AccessTokenResponse,
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
    UsernameChangeRequest,
    UsernameChangeResponse,
    UserResponse,
)
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id, get_refresh_cookie
from ..middleware.device import get_device_label
from ..middleware.rate_limit import auth_rate_limit

router = APIRouter(prefix="/auth", tags=["authentication"])


def set_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        max_age=settings.refresh_token_max_age,
        path=settings.refresh_cookie_path,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="strict",
    )


def clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path=settings.refresh_cookie_path,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="strict",
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_rate_limit)],
)
async def register(
    request: RegisterRequest,
    response: Response,
    device: str = Depends(get_device_label),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Register a new user and start a session."""
    tokens = await AuthService(session, settings).register(request, device)
    set_refresh_cookie(response, tokens.refresh_token, settings)
    return tokens.public()


@router.post("/login", response_model=TokenResponse, dependencies=[Depends(auth_rate_limit)])
async def login(
    request: LoginRequest,
    response: Response,
    device: str = Depends(get_device_label),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Login with email and password."""
    tokens = await AuthService(session, settings).login(request, device)
    set_refresh_cookie(response, tokens.refresh_token, settings)
    return tokens.public()


@router.post(
    "/refresh", response_model=AccessTokenResponse, dependencies=[Depends(auth_rate_limit)]
)
async def refresh_token(
    refresh_token: Optional[str] = Depends(get_refresh_cookie),
    device: str = Depends(get_device_label),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """New access token from the refresh cookie."""
    return await AuthService(session, settings).refresh(refresh_token, device)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    response: Response,
    current_user_id: UUID = Depends(get_current_user_id),
    refresh_token: Optional[str] = Depends(get_refresh_cookie),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Revoke this client's refresh token and clear the cookie."""
    await AuthService(session, settings).logout(current_user_id, refresh_token)
    clear_refresh_cookie(response, settings)


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Get current user profile."""
    return await AuthService(session, settings).get_current_user(current_user_id)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: PasswordChangeRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Change password; every session must log in again."""
    await AuthService(session, settings).change_password(current_user_id, request)
    return MessageResponse(message="Password changed successfully. Please log in again.")


@router.post("/change-username", response_model=UsernameChangeResponse)
async def change_username(
    request: UsernameChangeRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Change username after confirming the password."""
    return await AuthService(session, settings).change_username(current_user_id, request)
