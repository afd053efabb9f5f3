"""Unit tests for the static role to permission table."""

import pytest

from communiserver.core.permissions.catalog import Permission, UserRole
from communiserver.core.permissions.matrix import GLOBAL_PERMISSIONS, ROLE_PERMISSIONS


pytestmark = pytest.mark.unit


class TestRolePermissions:
    """Tests for ROLE_PERMISSIONS."""

    def test_every_role_has_an_entry(self):
        assert set(ROLE_PERMISSIONS) == set(UserRole)

    def test_admin_holds_every_permission(self):
        assert ROLE_PERMISSIONS[UserRole.ADMIN] == frozenset(Permission)

    @pytest.mark.parametrize("role", list(UserRole))
    def test_every_role_holds_global_permissions(self, role):
        assert GLOBAL_PERMISSIONS <= ROLE_PERMISSIONS[role]

    def test_citizen_holds_only_global_permissions(self):
        assert ROLE_PERMISSIONS[UserRole.CITIZEN] == GLOBAL_PERMISSIONS

    def test_house_representative_can_view_house(self):
        assert ROLE_PERMISSIONS[UserRole.HOUSE_REPRESENTATIVE] == GLOBAL_PERMISSIONS | {
            Permission.VIEW_HOUSE
        }

    @pytest.mark.parametrize(
        ("role", "permission"),
        [
            (UserRole.CELL_LEADER, Permission.CREATE_VILLAGE),
            (UserRole.CELL_LEADER, Permission.CREATE_VILLAGE_LEADER),
            (UserRole.VILLAGE_LEADER, Permission.CREATE_ISIBO),
            (UserRole.VILLAGE_LEADER, Permission.CREATE_ACTIVITY),
            (UserRole.ISIBO_LEADER, Permission.CREATE_HOUSE),
            (UserRole.ISIBO_LEADER, Permission.TAKE_ATTENDANCE),
        ],
    )
    def test_level_permissions(self, role, permission):
        assert permission in ROLE_PERMISSIONS[role]

    @pytest.mark.parametrize(
        ("role", "permission"),
        [
            (UserRole.CELL_LEADER, Permission.CREATE_CELL),
            (UserRole.VILLAGE_LEADER, Permission.CREATE_VILLAGE),
            (UserRole.ISIBO_LEADER, Permission.CREATE_ISIBO),
            (UserRole.ISIBO_LEADER, Permission.CREATE_CELL),
        ],
    )
    def test_leaders_cannot_create_their_own_level(self, role, permission):
        assert permission not in ROLE_PERMISSIONS[role]

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ROLE_PERMISSIONS[UserRole.CITIZEN] = frozenset(Permission)  # type: ignore[index]

    @pytest.mark.parametrize("role", list(UserRole))
    def test_permission_sets_are_frozen(self, role):
        assert isinstance(ROLE_PERMISSIONS[role], frozenset)
