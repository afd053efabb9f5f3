"""Permission and role catalog.

Both enumerations are closed: they are defined here and nowhere else,
and their values are the plain string tags that travel in tokens,
request bodies and the portal UI.
"""

from enum import StrEnum


class UserRole(StrEnum):
    """Roles a portal user can hold, from the top of the hierarchy down."""

    ADMIN = "ADMIN"
    CELL_LEADER = "CELL_LEADER"
    VILLAGE_LEADER = "VILLAGE_LEADER"
    ISIBO_LEADER = "ISIBO_LEADER"
    HOUSE_REPRESENTATIVE = "HOUSE_REPRESENTATIVE"
    CITIZEN = "CITIZEN"


class Permission(StrEnum):
    """Fine-grained capability tags checked before an action or view."""

    # Global
    VIEW_NOTIFICATIONS = "VIEW_NOTIFICATIONS"
    VIEW_PROFILE = "VIEW_PROFILE"

    # Admin
    ASSIGN_CELL_LEADERS = "ASSIGN_CELL_LEADERS"
    DEASSIGN_CELL_LEADERS = "DEASSIGN_CELL_LEADERS"
    CREATE_CELL_LEADER = "CREATE_CELL_LEADER"
    CREATE_CELL = "CREATE_CELL"
    UPDATE_CELL = "UPDATE_CELL"
    DELETE_CELL = "DELETE_CELL"
    VIEW_ALL_CELLS = "VIEW_ALL_CELLS"

    # Cell leader
    VIEW_CELL = "VIEW_CELL"
    ASSIGN_VILLAGE_LEADERS = "ASSIGN_VILLAGE_LEADERS"
    DEASSIGN_VILLAGE_LEADERS = "DEASSIGN_VILLAGE_LEADERS"
    VIEW_CELL_ANALYTICS = "VIEW_CELL_ANALYTICS"
    CREATE_VILLAGE_LEADER = "CREATE_VILLAGE_LEADER"
    VIEW_CELL_ACTIVITY = "VIEW_CELL_ACTIVITY"
    CREATE_VILLAGE = "CREATE_VILLAGE"
    UPDATE_VILLAGE = "UPDATE_VILLAGE"
    DELETE_VILLAGE = "DELETE_VILLAGE"
    VIEW_ALL_VILLAGES = "VIEW_ALL_VILLAGES"
    VIEW_LEADERS = "VIEW_LEADERS"

    # Village leader
    VIEW_VILLAGE = "VIEW_VILLAGE"
    ASSIGN_ISIBO_LEADERS = "ASSIGN_ISIBO_LEADERS"
    DEASSIGN_ISIBO_LEADERS = "DEASSIGN_ISIBO_LEADERS"
    VIEW_VILLAGE_ANALYTICS = "VIEW_VILLAGE_ANALYTICS"
    CREATE_ISIBO = "CREATE_ISIBO"
    UPDATE_ISIBO = "UPDATE_ISIBO"
    DELETE_ISIBO = "DELETE_ISIBO"
    CREATE_ISIBO_LEADER = "CREATE_ISIBO_LEADER"
    CREATE_ACTIVITY = "CREATE_ACTIVITY"
    UPDATE_ACTIVITY = "UPDATE_ACTIVITY"
    ADD_ACTIVITY_REPORT = "ADD_ACTIVITY_REPORT"
    VIEW_ALL_ISIBOS = "VIEW_ALL_ISIBOS"

    # Isibo leader
    VIEW_ISIBO = "VIEW_ISIBO"
    ASSIGN_HOUSE_REPRESENTATIVES = "ASSIGN_HOUSE_REPRESENTATIVES"
    DEASSIGN_HOUSE_REPRESENTATIVES = "DEASSIGN_HOUSE_REPRESENTATIVES"
    VIEW_ISIBO_ANALYTICS = "VIEW_ISIBO_ANALYTICS"
    CREATE_HOUSE = "CREATE_HOUSE"
    UPDATE_HOUSE = "UPDATE_HOUSE"
    DELETE_HOUSE = "DELETE_HOUSE"
    ADD_CITIZENS = "ADD_CITIZENS"
    CREATE_CITIZEN = "CREATE_CITIZEN"
    ASSIGN_CITIZENS_TO_HOUSE = "ASSIGN_CITIZENS_TO_HOUSE"
    VIEW_VILLAGE_ACTIVITY = "VIEW_VILLAGE_ACTIVITY"
    ADD_TASK_REPORT = "ADD_TASK_REPORT"
    TAKE_ATTENDANCE = "TAKE_ATTENDANCE"
    VIEW_ALL_HOUSES = "VIEW_ALL_HOUSES"

    # House representative
    VIEW_HOUSE = "VIEW_HOUSE"


def parse_role(value: object) -> UserRole | None:
    """Map a raw role tag to a UserRole.

    Matching ignores case and surrounding whitespace. Anything that is
    not a known role, including None and the empty string, maps to None.
    """
    if isinstance(value, UserRole):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UserRole(value.strip().upper())
    except ValueError:
        return None


def parse_permission(value: object) -> Permission | None:
    """Map a raw permission tag to a Permission, or None if unknown."""
    if isinstance(value, Permission):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Permission(value.strip().upper())
    except ValueError:
        return None
