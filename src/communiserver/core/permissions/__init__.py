"""Role-based permission model: catalog, role table, evaluator and guards.

FastAPI-specific dependencies live in ``communiserver.core.permissions.dependencies``
and are imported from there directly.
"""

from communiserver.core.permissions.catalog import (
    Permission,
    UserRole,
    parse_permission,
    parse_role,
)
from communiserver.core.permissions.checker import (
    AccessRequest,
    CombineMode,
    PermissionRequirement,
    get_permissions_for_role,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from communiserver.core.permissions.decorators import (
    enforce_requirement,
    require_all_permissions,
    require_any_permission,
    require_permission,
)
from communiserver.core.permissions.guard import (
    GuardDecision,
    GuardState,
    PermissionGuard,
)
from communiserver.core.permissions.matrix import GLOBAL_PERMISSIONS, ROLE_PERMISSIONS


__all__ = [
    "GLOBAL_PERMISSIONS",
    "ROLE_PERMISSIONS",
    "AccessRequest",
    "CombineMode",
    "GuardDecision",
    "GuardState",
    "Permission",
    "PermissionGuard",
    "PermissionRequirement",
    "UserRole",
    "enforce_requirement",
    "get_permissions_for_role",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "parse_permission",
    "parse_role",
    "require_all_permissions",
    "require_any_permission",
    "require_permission",
]
