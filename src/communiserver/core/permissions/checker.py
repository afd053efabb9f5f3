"""Permission checking logic.

This module answers "may role R do P?" against the static table in
``matrix``. Every function here is pure and fail-closed: an unknown
or missing role, or an unknown permission tag, is denied rather than
raising.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from communiserver.core.permissions.catalog import (
    Permission,
    UserRole,
    parse_permission,
    parse_role,
)
from communiserver.core.permissions.matrix import ROLE_PERMISSIONS


RoleLike = UserRole | str | None
PermissionLike = Permission | str


def get_permissions_for_role(role: RoleLike) -> frozenset[Permission]:
    """Get every permission held by a role.

    Args:
        role: Role tag (case-insensitive) or UserRole

    Returns:
        The role's permission set; empty for an unknown or missing role
    """
    user_role = parse_role(role)
    if user_role is None:
        return frozenset()
    return ROLE_PERMISSIONS.get(user_role, frozenset())


def has_permission(role: RoleLike, permission: PermissionLike) -> bool:
    """Check if a role holds a specific permission.

    Args:
        role: Role tag (case-insensitive) or UserRole
        permission: Permission tag or Permission

    Returns:
        True if the permission is in the role's set, False otherwise
    """
    perm = parse_permission(permission)
    if perm is None:
        return False
    return perm in get_permissions_for_role(role)


def has_any_permission(role: RoleLike, permissions: Iterable[PermissionLike]) -> bool:
    """Check if a role holds at least one of the permissions.

    An empty list passes. Callers that mean to restrict access must
    supply at least one permission.
    """
    perms = list(permissions)
    if not perms:
        return True
    return any(has_permission(role, p) for p in perms)


def has_all_permissions(role: RoleLike, permissions: Iterable[PermissionLike]) -> bool:
    """Check if a role holds every one of the permissions.

    An empty list passes, same caveat as has_any_permission.
    """
    return all(has_permission(role, p) for p in permissions)


class CombineMode(StrEnum):
    """How a list of required permissions is combined."""

    ANY = "any"
    ALL = "all"


@dataclass(frozen=True)
class AccessRequest:
    """A caller's role paired with what it is asking to do.

    Created per request, evaluated once, then discarded.
    """

    role: RoleLike
    permissions: tuple[PermissionLike, ...]
    mode: CombineMode = CombineMode.ALL

    @classmethod
    def single(cls, role: RoleLike, permission: PermissionLike) -> "AccessRequest":
        return cls(role=role, permissions=(permission,), mode=CombineMode.ALL)

    def evaluate(self) -> bool:
        if self.mode is CombineMode.ANY:
            return has_any_permission(self.role, self.permissions)
        return has_all_permissions(self.role, self.permissions)


def _freeze(permissions: Iterable[PermissionLike] | None) -> tuple[PermissionLike, ...] | None:
    if permissions is None:
        return None
    return tuple(permissions)


@dataclass(frozen=True)
class PermissionRequirement:
    """What a guarded route or component asks of the caller's role.

    Any combination of a single permission, an any-of list and an
    all-of list may be configured; every configured check must pass.
    A requirement with nothing configured lets everyone through.

    Attributes:
        permission: Single permission that must be held
        any_permissions: At least one of these must be held
        all_permissions: Every one of these must be held
        require_non_empty: Reject empty lists at construction time
    """

    permission: PermissionLike | None = None
    any_permissions: tuple[PermissionLike, ...] | None = None
    all_permissions: tuple[PermissionLike, ...] | None = None
    require_non_empty: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        # Accept any iterable from call sites, store tuples
        object.__setattr__(self, "any_permissions", _freeze(self.any_permissions))
        object.__setattr__(self, "all_permissions", _freeze(self.all_permissions))

        if self.require_non_empty:
            if self.any_permissions is not None and not self.any_permissions:
                raise ValueError("any_permissions must not be empty")
            if self.all_permissions is not None and not self.all_permissions:
                raise ValueError("all_permissions must not be empty")

    @property
    def is_configured(self) -> bool:
        return (
            self.permission is not None
            or self.any_permissions is not None
            or self.all_permissions is not None
        )

    def requests_for(self, role: RoleLike) -> list[AccessRequest]:
        """Expand the requirement into the access requests it stands for."""
        requests: list[AccessRequest] = []
        if self.permission is not None:
            requests.append(AccessRequest.single(role, self.permission))
        if self.any_permissions is not None:
            requests.append(AccessRequest(role, self.any_permissions, CombineMode.ANY))
        if self.all_permissions is not None:
            requests.append(AccessRequest(role, self.all_permissions, CombineMode.ALL))
        return requests

    def is_satisfied_by(self, role: RoleLike) -> bool:
        return all(request.evaluate() for request in self.requests_for(role))

    def describe(self) -> list[str]:
        """Flat list of the permission tags this requirement mentions."""
        tags: list[str] = []
        if self.permission is not None:
            tags.append(str(self.permission))
        for group in (self.any_permissions, self.all_permissions):
            if group:
                tags.extend(str(p) for p in group)
        return tags
