"""User database models."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from communiserver.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_IPV6_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_ROLE_LENGTH,
    MAX_USER_AGENT_LENGTH,
    SHA256_HEX_LENGTH,
)
from communiserver.core.database.base import Base, TimestampMixin, UUIDMixin
from communiserver.core.permissions.catalog import UserRole


class User(Base, UUIDMixin, TimestampMixin):
    """A portal user.

    The role is assigned when the account is created and decides what
    the user may see and do everywhere in the portal.

    Attributes:
        email: Unique login email
        names: Display name
        phone: Optional phone number
        password_hash: Bcrypt-hashed password
        role: The user's role
        is_active: Whether the user can log in
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    names: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    phone: Mapped[str | None] = mapped_column(
        String(MAX_PHONE_LENGTH),
        nullable=True,
    )
    password_hash: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", native_enum=False, length=MAX_ROLE_LENGTH),
        default=UserRole.CITIZEN,
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class RefreshToken(Base, UUIDMixin, TimestampMixin):
    """Stored refresh token, hashed, expiring and revocable."""

    __tablename__ = "refresh_tokens"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash: Mapped[str] = mapped_column(
        String(SHA256_HEX_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    revoked: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    user_agent: Mapped[str | None] = mapped_column(
        String(MAX_USER_AGENT_LENGTH),
        nullable=True,
    )
    ip_address: Mapped[str | None] = mapped_column(
        String(MAX_IPV6_LENGTH),
        nullable=True,
    )

    user: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, user_id={self.user_id}, revoked={self.revoked})>"
