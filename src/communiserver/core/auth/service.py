"""Authentication service for login and token management."""

from datetime import UTC, datetime
from typing import Annotated

import structlog
from fastapi import Depends

from communiserver.api.dependencies import DBSession
from communiserver.config import settings
from communiserver.core.auth.backend import (
    create_access_token,
    create_refresh_token,
    get_token_expiration,
    hash_token,
    verify_password,
)
from communiserver.core.auth.schemas import TokenPair
from communiserver.core.errors import UnauthorizedError
from communiserver.modules.users.models import RefreshToken, User
from communiserver.modules.users.repos import RefreshTokenRepository, UserRepository


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations.

    Accounts are created by other users (see the users module), so
    this service only signs people in and out.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)
        self.token_repo = RefreshTokenRepository(db)

    async def login(
        self,
        email: str,
        password: str,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> tuple[User, TokenPair]:
        """Authenticate a user with email and password.

        Args:
            email: User's email address
            password: Plain text password
            user_agent: Client user agent
            ip_address: Client IP address

        Returns:
            Tuple of (user, token_pair)

        Raises:
            UnauthorizedError: If credentials are invalid or the account is inactive
        """
        user = await self.user_repo.get_by_email(email)
        if not user or not user.password_hash or not verify_password(password, user.password_hash):
            logger.info("login_failed", reason="invalid_credentials")
            raise UnauthorizedError(
                "Invalid email or password",
                error_code="invalid_credentials",
            )

        if not user.is_active:
            logger.info("login_failed", reason="account_inactive", user_id=str(user.id))
            raise UnauthorizedError(
                "Account is deactivated",
                error_code="account_inactive",
            )

        token_pair = await self._create_tokens(user, user_agent, ip_address)
        logger.info("login_succeeded", user_id=str(user.id), role=str(user.role))
        return user, token_pair

    async def refresh_tokens(
        self,
        refresh_token: str,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> TokenPair:
        """Exchange a refresh token for a new token pair.

        The old refresh token is revoked. The new access token carries
        the user's current role.

        Raises:
            UnauthorizedError: If the refresh token is invalid, expired or revoked
        """
        stored_token = await self.token_repo.get_by_hash(hash_token(refresh_token))
        if not stored_token:
            raise UnauthorizedError(
                "Invalid refresh token",
                error_code="invalid_refresh_token",
            )

        if stored_token.expires_at < datetime.now(UTC):
            await self.token_repo.revoke(stored_token, commit=True)
            raise UnauthorizedError(
                "Refresh token expired",
                error_code="token_expired",
            )

        user = await self.user_repo.get_by_id(stored_token.user_id)
        if not user or not user.is_active:
            await self.token_repo.revoke(stored_token, commit=True)
            raise UnauthorizedError(
                "User not found or inactive",
                error_code="user_invalid",
            )

        await self.token_repo.revoke(stored_token)
        return await self._create_tokens(user, user_agent, ip_address)

    async def logout(self, refresh_token: str) -> None:
        """Revoke a refresh token. Unknown tokens are ignored."""
        stored_token = await self.token_repo.get_by_hash(hash_token(refresh_token))
        if stored_token:
            await self.token_repo.revoke(stored_token)
            logger.info("logout", user_id=str(stored_token.user_id))

    async def _create_tokens(
        self,
        user: User,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> TokenPair:
        access_token = create_access_token(user.id, user.role)
        refresh_token = create_refresh_token()

        await self.token_repo.create(
            RefreshToken(
                user_id=user.id,
                token_hash=hash_token(refresh_token),
                expires_at=get_token_expiration(),
                user_agent=user_agent,
                ip_address=ip_address,
            )
        )

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.access_token_expire_minutes * 60,
            role=user.role,
        )


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
