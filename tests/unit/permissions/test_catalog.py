"""Unit tests for the role and permission catalog."""

import pytest

from communiserver.core.permissions.catalog import (
    Permission,
    UserRole,
    parse_permission,
    parse_role,
)


pytestmark = pytest.mark.unit


class TestUserRole:
    """Tests for the UserRole enumeration."""

    def test_roles_are_closed_set(self):
        assert {role.value for role in UserRole} == {
            "ADMIN",
            "CELL_LEADER",
            "VILLAGE_LEADER",
            "ISIBO_LEADER",
            "HOUSE_REPRESENTATIVE",
            "CITIZEN",
        }

    def test_roles_compare_equal_to_their_tags(self):
        assert UserRole.ISIBO_LEADER == "ISIBO_LEADER"


class TestPermission:
    """Tests for the Permission enumeration."""

    def test_values_match_names(self):
        for permission in Permission:
            assert permission.value == permission.name

    def test_tags_are_unique(self):
        values = [p.value for p in Permission]
        assert len(values) == len(set(values))

    @pytest.mark.parametrize(
        "tag",
        ["VIEW_LEADERS", "CREATE_CITIZEN", "VIEW_ALL_ISIBOS", "VIEW_ALL_HOUSES", "TAKE_ATTENDANCE"],
    )
    def test_portal_tags_are_present(self, tag):
        assert Permission(tag).value == tag


class TestParseRole:
    """Tests for parse_role."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("ADMIN", UserRole.ADMIN),
            ("cell_leader", UserRole.CELL_LEADER),
            ("  Village_Leader ", UserRole.VILLAGE_LEADER),
            (UserRole.CITIZEN, UserRole.CITIZEN),
        ],
    )
    def test_known_roles(self, raw, expected):
        assert parse_role(raw) is expected

    @pytest.mark.parametrize("raw", [None, "", "MAYOR", 42, ["ADMIN"]])
    def test_unknown_values_map_to_none(self, raw):
        assert parse_role(raw) is None


class TestParsePermission:
    """Tests for parse_permission."""

    def test_known_permission(self):
        assert parse_permission("create_cell") is Permission.CREATE_CELL

    def test_enum_member_passes_through(self):
        assert parse_permission(Permission.VIEW_HOUSE) is Permission.VIEW_HOUSE

    @pytest.mark.parametrize("raw", [None, "", "LAUNCH_ROCKETS", 7])
    def test_unknown_values_map_to_none(self, raw):
        assert parse_permission(raw) is None
