"""Authentication schemas for token handling."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from communiserver.core.permissions.catalog import UserRole


class TokenData(BaseModel):
    """Data extracted from a JWT token.

    Attributes:
        user_id: The user's UUID
        role: Role claim, None when missing or not a known role
        exp: Token expiration time
        type: Token type (access or refresh)
        jti: Unique token id
    """

    user_id: UUID
    role: UserRole | None = None
    exp: datetime
    type: str = "access"
    jti: str | None = None


class TokenPair(BaseModel):
    """A pair of access and refresh tokens."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    role: UserRole
