"""Static role to permission table.

Built once at import and exposed read-only. The backend route guards
and the page/navigation gating both read this table, so it is the
single place a role's capabilities are defined.
"""

from collections.abc import Mapping
from types import MappingProxyType

from communiserver.core.permissions.catalog import Permission, UserRole


GLOBAL_PERMISSIONS: frozenset[Permission] = frozenset(
    {
        Permission.VIEW_NOTIFICATIONS,
        Permission.VIEW_PROFILE,
    }
)

_CELL_LEADER = frozenset(
    {
        Permission.VIEW_CELL,
        Permission.ASSIGN_VILLAGE_LEADERS,
        Permission.DEASSIGN_VILLAGE_LEADERS,
        Permission.VIEW_CELL_ANALYTICS,
        Permission.CREATE_VILLAGE_LEADER,
        Permission.VIEW_CELL_ACTIVITY,
        Permission.CREATE_VILLAGE,
        Permission.UPDATE_VILLAGE,
        Permission.DELETE_VILLAGE,
        Permission.VIEW_ALL_VILLAGES,
        Permission.VIEW_LEADERS,
    }
)

_VILLAGE_LEADER = frozenset(
    {
        Permission.VIEW_VILLAGE,
        Permission.ASSIGN_ISIBO_LEADERS,
        Permission.DEASSIGN_ISIBO_LEADERS,
        Permission.VIEW_VILLAGE_ANALYTICS,
        Permission.CREATE_ISIBO,
        Permission.UPDATE_ISIBO,
        Permission.DELETE_ISIBO,
        Permission.CREATE_ISIBO_LEADER,
        Permission.CREATE_ACTIVITY,
        Permission.UPDATE_ACTIVITY,
        Permission.ADD_ACTIVITY_REPORT,
        Permission.VIEW_ALL_ISIBOS,
        Permission.VIEW_LEADERS,
    }
)

_ISIBO_LEADER = frozenset(
    {
        Permission.VIEW_ISIBO,
        Permission.ASSIGN_HOUSE_REPRESENTATIVES,
        Permission.DEASSIGN_HOUSE_REPRESENTATIVES,
        Permission.VIEW_ISIBO_ANALYTICS,
        Permission.CREATE_HOUSE,
        Permission.UPDATE_HOUSE,
        Permission.DELETE_HOUSE,
        Permission.ADD_CITIZENS,
        Permission.CREATE_CITIZEN,
        Permission.ASSIGN_CITIZENS_TO_HOUSE,
        Permission.VIEW_VILLAGE_ACTIVITY,
        Permission.ADD_TASK_REPORT,
        Permission.TAKE_ATTENDANCE,
        Permission.VIEW_ALL_HOUSES,
    }
)

_HOUSE_REPRESENTATIVE = frozenset({Permission.VIEW_HOUSE})


def _build() -> Mapping[UserRole, frozenset[Permission]]:
    table: dict[UserRole, frozenset[Permission]] = {
        # Admin can do everything
        UserRole.ADMIN: frozenset(Permission),
        UserRole.CELL_LEADER: GLOBAL_PERMISSIONS | _CELL_LEADER,
        UserRole.VILLAGE_LEADER: GLOBAL_PERMISSIONS | _VILLAGE_LEADER,
        UserRole.ISIBO_LEADER: GLOBAL_PERMISSIONS | _ISIBO_LEADER,
        UserRole.HOUSE_REPRESENTATIVE: GLOBAL_PERMISSIONS | _HOUSE_REPRESENTATIVE,
        UserRole.CITIZEN: GLOBAL_PERMISSIONS,
    }

    missing = [role.value for role in UserRole if role not in table]
    if missing:
        raise RuntimeError(f"Role permission table has no entry for: {', '.join(missing)}")

    return MappingProxyType(table)


ROLE_PERMISSIONS: Mapping[UserRole, frozenset[Permission]] = _build()
