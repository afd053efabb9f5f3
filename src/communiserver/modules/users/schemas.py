"""Pydantic schemas for user and authentication operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from communiserver.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MAX_PHONE_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from communiserver.core.permissions.catalog import Permission, UserRole, parse_role


# ============================================================
# User Schemas
# ============================================================


class UserBase(BaseModel):
    """Base schema for user data."""

    email: EmailStr
    names: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    phone: str | None = Field(None, max_length=MAX_PHONE_LENGTH)


class UserCreate(UserBase):
    """Schema for creating a user with a role."""

    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    role: UserRole = UserRole.CITIZEN

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: object) -> object:
        """Accept role tags in any case, like the rest of the portal."""
        return parse_role(v) or v


class UserResponse(UserBase):
    """Schema for user response data."""

    id: UUID
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserProfileResponse(UserResponse):
    """The current user together with what their role allows."""

    permissions: list[Permission]


class UserListResponse(BaseModel):
    """Schema for listing users."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int


# ============================================================
# Authentication Schemas
# ============================================================


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Schema for authentication token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")
    role: UserRole


class RefreshTokenRequest(BaseModel):
    """Schema for refreshing or revoking a refresh token."""

    refresh_token: str
