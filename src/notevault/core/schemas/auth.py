"""
Authentication schemas.

These schemas define the API contracts for registration, login, token
refresh and account changes. The refresh token itself travels in an
HTTP-only cookie and never appears in these bodies.
"""

import re
import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
PASSWORD_SPECIALS = "@$!%*?&"


def check_username(value: str) -> str:
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username can only contain letters, numbers and underscores")
    return value


def check_password_strength(value: str) -> str:
    """Require lower, upper, digit and one of ``@$!%*?&``."""
    if not (
        any(c.islower() for c in value)
        and any(c.isupper() for c in value)
        and any(c.isdigit() for c in value)
        and any(c in PASSWORD_SPECIALS for c in value)
    ):
        raise ValueError(
            "Password must contain an uppercase letter, a lowercase letter, "
            f"a number and a special character ({PASSWORD_SPECIALS})"
        )
    return value


class RegisterRequest(BaseModel):
    """User registration request schema."""

    username: str = Field(min_length=3, max_length=50, description="Unique username")
    email: EmailStr = Field(description="Unique email address")
    password: str = Field(min_length=8, max_length=100, description="User password")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        return check_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password_strength(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "new_user",
                "email": "new_user@example.com",
                "password": "Secure@Pass1",
            }
        }
    )


class LoginRequest(BaseModel):
    """User login request schema."""

    email: EmailStr = Field(description="Account email")
    password: str = Field(min_length=1, max_length=100, description="User password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class PasswordChangeRequest(BaseModel):
    """Password change request schema."""

    current_password: str = Field(min_length=1, max_length=100)
    new_password: str = Field(min_length=8, max_length=100)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        return check_password_strength(v)


class UsernameChangeRequest(BaseModel):
    """Username change request schema; the password confirms the change."""

    new_username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=1, max_length=100)

    @field_validator("new_username")
    @classmethod
    def validate_username(cls, v):
        return check_username(v)


class UserResponse(BaseModel):
    """Public user fields."""

    id: uuid.UUID
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AccessTokenResponse(BaseModel):
    """Access token issued by a refresh."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(description="Access token lifetime in seconds")


class TokenResponse(AccessTokenResponse):
    """Register/login response; the refresh token is set as a cookie."""

    user: UserResponse


class UsernameChangeResponse(BaseModel):
    username: str
    message: str = "Username updated successfully"


class MessageResponse(BaseModel):
    message: str


class SessionTokens(BaseModel):
    """Service-level result of register/login: both tokens plus the user."""

    access_token: str
    refresh_token: str
    expires_in: int
    user: UserResponse

    def public(self) -> TokenResponse:
        return TokenResponse(
            access_token=self.access_token, expires_in=self.expires_in, user=self.user
        )
