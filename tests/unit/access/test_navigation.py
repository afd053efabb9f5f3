"""Unit tests for sidebar and location tab gating."""

import pytest

from communiserver.core.permissions.catalog import UserRole
from communiserver.modules.access.navigation import LOCATION_TABS, SIDEBAR_ITEMS, visible_items


pytestmark = pytest.mark.unit


def keys(items):
    return [item.key for item in items]


class TestVisibleItems:
    """Tests for visible_items."""

    def test_admin_sees_everything(self):
        assert keys(visible_items(SIDEBAR_ITEMS, UserRole.ADMIN)) == keys(SIDEBAR_ITEMS)
        assert keys(visible_items(LOCATION_TABS, UserRole.ADMIN)) == keys(LOCATION_TABS)

    def test_citizen_sees_only_dashboard(self):
        assert keys(visible_items(SIDEBAR_ITEMS, UserRole.CITIZEN)) == ["dashboard"]
        assert visible_items(LOCATION_TABS, UserRole.CITIZEN) == []

    def test_unknown_role_sees_only_ungated_items(self):
        assert keys(visible_items(SIDEBAR_ITEMS, "MAYOR")) == ["dashboard"]

    def test_cell_leader(self):
        assert keys(visible_items(SIDEBAR_ITEMS, UserRole.CELL_LEADER)) == [
            "dashboard",
            "cell",
            "cell-analytics",
            "village-leaders",
        ]
        assert keys(visible_items(LOCATION_TABS, UserRole.CELL_LEADER)) == ["villages"]

    def test_village_leader(self):
        assert keys(visible_items(SIDEBAR_ITEMS, UserRole.VILLAGE_LEADER)) == [
            "dashboard",
            "village",
            "village-analytics",
            "isibos",
            "activities",
        ]
        assert keys(visible_items(LOCATION_TABS, UserRole.VILLAGE_LEADER)) == ["isibos"]

    def test_isibo_leader(self):
        assert keys(visible_items(SIDEBAR_ITEMS, UserRole.ISIBO_LEADER)) == [
            "dashboard",
            "isibo",
            "isibo-analytics",
            "citizens",
            "tasks",
        ]
        assert keys(visible_items(LOCATION_TABS, UserRole.ISIBO_LEADER)) == ["houses"]

    def test_order_is_preserved(self):
        reversed_items = tuple(reversed(SIDEBAR_ITEMS))
        assert keys(visible_items(reversed_items, UserRole.ADMIN)) == keys(reversed_items)
