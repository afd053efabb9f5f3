"""User repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from communiserver.api.dependencies import DBSession
from communiserver.core.permissions.catalog import UserRole
from communiserver.modules.users.models import RefreshToken, User


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_users(
        self,
        role: UserRole | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        """List users with pagination.

        Args:
            role: Only return users holding this role
            page: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            Tuple of (users list, total count)
        """
        count_stmt = select(func.count()).select_from(User)
        stmt = select(User)
        if role is not None:
            count_stmt = count_stmt.where(User.role == role)
            stmt = stmt.where(User.role == role)

        total = (await self.session.execute(count_stmt)).scalar_one()

        offset = (page - 1) * page_size
        stmt = stmt.order_by(User.created_at.desc()).offset(offset).limit(page_size)
        result = await self.session.execute(stmt)

        return list(result.scalars().all()), total


class RefreshTokenRepository:
    """Repository for RefreshToken database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        self.session.add(token)
        await self.session.flush()
        return token

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        """Get a non-revoked refresh token by its hash."""
        stmt = select(RefreshToken).where(
            RefreshToken.token_hash == token_hash,
            RefreshToken.revoked == False,  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def revoke(self, token: RefreshToken, commit: bool = False) -> None:
        """Mark a token revoked.

        Pass ``commit=True`` when the request is about to fail, since the
        session is rolled back on error.
        """
        token.revoked = True
        if commit:
            await self.session.commit()
        else:
            await self.session.flush()


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
