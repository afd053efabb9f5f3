"""User service for business logic."""

from types import MappingProxyType
from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import Depends

from communiserver.core.auth.backend import hash_password
from communiserver.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from communiserver.core.permissions.catalog import Permission, UserRole
from communiserver.core.permissions.checker import PermissionRequirement, get_permissions_for_role
from communiserver.core.permissions.decorators import enforce_requirement
from communiserver.modules.users.models import User
from communiserver.modules.users.repos import UserRepo
from communiserver.modules.users.schemas import UserCreate


logger = structlog.get_logger()


# Permission a requester needs to create an account with a given role.
# ADMIN is missing on purpose: only admins may create admins.
ROLE_CREATION_PERMISSIONS = MappingProxyType(
    {
        UserRole.CELL_LEADER: Permission.CREATE_CELL_LEADER,
        UserRole.VILLAGE_LEADER: Permission.CREATE_VILLAGE_LEADER,
        UserRole.ISIBO_LEADER: Permission.CREATE_ISIBO_LEADER,
        UserRole.HOUSE_REPRESENTATIVE: Permission.ASSIGN_HOUSE_REPRESENTATIVES,
        UserRole.CITIZEN: Permission.CREATE_CITIZEN,
    }
)


def authorize_role_assignment(requester: Any, role: UserRole) -> None:
    """Raise unless the requester may create an account with ``role``."""
    permission = ROLE_CREATION_PERMISSIONS.get(role)
    if permission is None:
        if getattr(requester, "role", None) != UserRole.ADMIN:
            raise PermissionDeniedError(
                "Only administrators can create administrator accounts",
                role=str(role),
            )
        return

    enforce_requirement(requester, PermissionRequirement(permission=permission))


class UserService:
    """Service for user operations."""

    def __init__(self, repo: UserRepo) -> None:
        self.repo = repo

    async def create_user(self, data: UserCreate, requester: Any) -> User:
        """Create a user on behalf of ``requester``.

        Raises:
            PermissionDeniedError: If the requester may not assign the role
            ConflictError: If the email is already registered
        """
        authorize_role_assignment(requester, data.role)

        if await self.repo.get_by_email(data.email):
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": data.email},
            )

        user = User(
            email=data.email.lower(),
            names=data.names,
            phone=data.phone,
            password_hash=hash_password(data.password),
            role=data.role,
            is_active=True,
        )
        user = await self.repo.create(user)

        logger.info(
            "user_created",
            user_id=str(user.id),
            role=str(user.role),
            created_by=str(getattr(requester, "id", "")),
        )
        return user

    async def get_user(self, user_id: UUID) -> User:
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found", resource="user", resource_id=str(user_id))
        return user

    async def list_users(
        self,
        role: UserRole | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        return await self.repo.list_users(role=role, page=page, page_size=page_size)

    @staticmethod
    def permissions_of(user: Any) -> list[Permission]:
        """Sorted permissions of a user's role."""
        return sorted(get_permissions_for_role(getattr(user, "role", None)))


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
