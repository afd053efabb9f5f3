"""Authentication backend for JWT and password handling.

This module provides core authentication utilities including:
- Password hashing with bcrypt
- JWT access tokens carrying the user's role
- Refresh token generation and hashing for storage
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from communiserver.config import settings
from communiserver.core.auth.schemas import TokenData
from communiserver.core.constants import (
    ACCESS_TOKEN_JTI_LENGTH,
    BCRYPT_ROUNDS,
    REFRESH_TOKEN_BYTES,
)
from communiserver.core.permissions.catalog import UserRole, parse_role


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


# ============================================================
# Password Utilities
# ============================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ============================================================
# JWT Token Utilities
# ============================================================


def create_access_token(
    user_id: UUID,
    role: UserRole | str,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Create a short-lived JWT access token.

    Args:
        user_id: The user's UUID
        role: The user's role, stored in the ``role`` claim
        expires_delta: Optional custom expiration time
        additional_claims: Optional extra claims to include

    Returns:
        Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "role": str(role),
        "exp": expire,
        "type": "access",
        "iat": now,
        "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),
    }

    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_refresh_token() -> str:
    """Create a long-lived refresh token.

    The refresh token is an opaque random string, stored hashed.
    """
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """SHA-256 hash of a token, for storage."""
    return hashlib.sha256(token.encode()).hexdigest()


def decode_token(token: str) -> TokenData | None:
    """Decode and validate a JWT token.

    An unknown role claim does not invalidate the token; it decodes to
    ``role=None`` and the permission layer denies everything for it.

    Returns:
        TokenData if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )

        user_id = payload.get("sub")
        exp = payload.get("exp")
        if not user_id or exp is None:
            return None

        return TokenData(
            user_id=UUID(user_id),
            role=parse_role(payload.get("role")),
            exp=datetime.fromtimestamp(exp, tz=UTC),
            type=payload.get("type", "access"),
            jti=payload.get("jti"),
        )

    except (JWTError, ValueError):
        return None


def get_token_expiration(days: int | None = None) -> datetime:
    """Get the expiration datetime for a refresh token."""
    if days is None:
        days = settings.refresh_token_expire_days
    return datetime.now(UTC) + timedelta(days=days)
