"""Pydantic schemas for the access API."""

from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from communiserver.core.permissions.catalog import Permission, UserRole
from communiserver.core.permissions.checker import PermissionRequirement
from communiserver.core.permissions.guard import GuardState


class PermissionCatalogResponse(BaseModel):
    """Every permission the portal knows about."""

    permissions: list[Permission]


class RolePermissionsResponse(BaseModel):
    """The permissions granted to one role."""

    role: UserRole
    permissions: list[Permission]


class RoleMapResponse(BaseModel):
    roles: list[RolePermissionsResponse]


class MyAccessResponse(BaseModel):
    """The current user's role and what it allows."""

    user_id: UUID
    role: UserRole | None
    permissions: list[Permission]


class AccessCheckRequest(BaseModel):
    """Permissions to test against the current user's role.

    Every field that is set must pass. At least one must be set, and
    lists must not be empty.
    """

    permission: Permission | None = None
    any_permissions: list[Permission] | None = Field(None, min_length=1)
    all_permissions: list[Permission] | None = Field(None, min_length=1)

    @model_validator(mode="after")
    def check_configured(self) -> "AccessCheckRequest":
        if self.permission is None and self.any_permissions is None and self.all_permissions is None:
            raise ValueError("Provide permission, any_permissions or all_permissions")
        return self

    def to_requirement(self) -> PermissionRequirement:
        return PermissionRequirement(
            permission=self.permission,
            any_permissions=self.any_permissions,
            all_permissions=self.all_permissions,
            require_non_empty=True,
        )


class AccessCheckResponse(BaseModel):
    allowed: bool
    role: UserRole | None


class NavItemResponse(BaseModel):
    key: str
    label: str
    href: str


class NavigationResponse(BaseModel):
    """Menu entries visible to the current user."""

    sidebar: list[NavItemResponse]
    location_tabs: list[NavItemResponse]


class PageDecisionResponse(BaseModel):
    """Guard outcome for a dashboard path."""

    path: str
    state: GuardState
    redirect_to: str | None = None
