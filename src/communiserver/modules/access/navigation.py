"""Sidebar entries and location tabs, each gated by a requirement."""

from collections.abc import Iterable
from dataclasses import dataclass

from communiserver.core.permissions.catalog import Permission
from communiserver.core.permissions.checker import PermissionRequirement, RoleLike


@dataclass(frozen=True)
class NavItem:
    """A menu entry shown only to roles that satisfy its requirement.

    An item with an empty requirement is shown to everyone.
    """

    key: str
    label: str
    href: str
    requirement: PermissionRequirement = PermissionRequirement()


def _gated(key: str, label: str, href: str, permission: Permission) -> NavItem:
    return NavItem(key, label, href, PermissionRequirement(permission=permission))


def _tab(key: str, label: str, *permissions: Permission) -> NavItem:
    return NavItem(
        key,
        label,
        f"/dashboard/locations/{key}",
        PermissionRequirement(any_permissions=permissions, require_non_empty=True),
    )


SIDEBAR_ITEMS: tuple[NavItem, ...] = (
    NavItem("dashboard", "Dashboard", "/dashboard"),
    # administration
    _gated("cell-leaders", "Cell Leaders", "/dashboard/cell-leaders", Permission.ASSIGN_CELL_LEADERS),
    # cell level
    _gated("cell", "My Cell", "/dashboard/cell", Permission.VIEW_CELL),
    _gated("cell-analytics", "Cell Analytics", "/dashboard/cell-analytics", Permission.VIEW_CELL_ANALYTICS),
    _gated("village-leaders", "Village Leaders", "/dashboard/village-leaders", Permission.ASSIGN_VILLAGE_LEADERS),
    # village level
    _gated("village", "My Village", "/dashboard/village", Permission.VIEW_VILLAGE),
    _gated(
        "village-analytics",
        "Village Analytics",
        "/dashboard/village-analytics",
        Permission.VIEW_VILLAGE_ANALYTICS,
    ),
    _gated("isibos", "Manage Isibos", "/dashboard/isibos", Permission.CREATE_ISIBO),
    _gated("activities", "Activities", "/dashboard/activities", Permission.CREATE_ACTIVITY),
    # isibo level
    _gated("isibo", "My Isibo", "/dashboard/isibo", Permission.VIEW_ISIBO),
    _gated("isibo-analytics", "Isibo Analytics", "/dashboard/isibo-analytics", Permission.VIEW_ISIBO_ANALYTICS),
    _gated("citizens", "Manage Citizens", "/dashboard/citizens", Permission.ADD_CITIZENS),
    _gated("tasks", "Tasks", "/dashboard/tasks", Permission.VIEW_VILLAGE_ACTIVITY),
)

LOCATION_TABS: tuple[NavItem, ...] = (
    _tab("cells", "Cells", Permission.VIEW_ALL_CELLS, Permission.CREATE_CELL),
    _tab("villages", "Villages", Permission.VIEW_ALL_VILLAGES, Permission.CREATE_VILLAGE, Permission.UPDATE_VILLAGE),
    _tab("isibos", "Isibos", Permission.VIEW_ALL_ISIBOS, Permission.CREATE_ISIBO, Permission.UPDATE_ISIBO),
    _tab("houses", "Houses", Permission.VIEW_ALL_HOUSES, Permission.CREATE_HOUSE, Permission.UPDATE_HOUSE),
)


def visible_items(items: Iterable[NavItem], role: RoleLike) -> list[NavItem]:
    """Items whose requirement ``role`` satisfies, in their original order."""
    return [item for item in items if item.requirement.is_satisfied_by(role)]
