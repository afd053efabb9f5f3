"""Unit tests for the permission guard state machine."""

import asyncio

import pytest

from communiserver.config import settings
from communiserver.core.permissions.catalog import Permission, UserRole
from communiserver.core.permissions.checker import PermissionRequirement
from communiserver.core.permissions.guard import LOADING, GuardState, PermissionGuard


pytestmark = pytest.mark.unit


def role_provider(role):
    async def provide():
        return role

    return provide


class TestPermissionGuard:
    """Tests for PermissionGuard."""

    def test_starts_loading(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_CELL))
        assert guard.state is GuardState.LOADING
        assert guard.decision == LOADING
        assert guard.decision.redirect_to is None

    def test_default_fallback_is_dashboard(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_CELL))
        assert guard.fallback_url == settings.guard_fallback_url == "/dashboard"

    async def test_isibo_leader_is_sent_to_locations(self):
        guard = PermissionGuard(
            PermissionRequirement(any_permissions=[Permission.CREATE_CELL, Permission.CREATE_ISIBO]),
            fallback_url="/dashboard/locations",
        )

        decision = await guard.resolve(role_provider(UserRole.ISIBO_LEADER))

        assert decision.state is GuardState.UNAUTHORIZED
        assert decision.redirect_to == "/dashboard/locations"
        assert guard.state is GuardState.UNAUTHORIZED

    async def test_admin_is_authorized(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_CELL))

        decision = await guard.resolve(role_provider(UserRole.ADMIN))

        assert decision.state is GuardState.AUTHORIZED
        assert decision.redirect_to is None
        assert decision.allowed is True

    async def test_accepts_an_awaitable(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.VIEW_HOUSE))

        decision = await guard.resolve(role_provider(UserRole.HOUSE_REPRESENTATIVE)())

        assert decision.allowed is True

    async def test_missing_role_is_unauthorized(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.VIEW_PROFILE))

        decision = await guard.resolve(role_provider(None))

        assert decision.state is GuardState.UNAUTHORIZED

    async def test_provider_failure_is_unauthorized(self):
        async def broken():
            raise ConnectionError("identity service unavailable")

        guard = PermissionGuard(
            PermissionRequirement(permission=Permission.VIEW_PROFILE),
            fallback_url="/dashboard",
        )

        decision = await guard.resolve(broken)

        assert decision.state is GuardState.UNAUTHORIZED
        assert decision.redirect_to == "/dashboard"
        assert guard.role is None

    def test_decide_is_pure(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_CELL))

        assert guard.decide(UserRole.ADMIN).allowed is True
        assert guard.decide(UserRole.ADMIN, resolved=False) == LOADING
        assert guard.state is GuardState.LOADING

    def test_stale_generation_is_ignored(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_CELL))
        older = guard.begin()
        newer = guard.begin()

        guard.apply(UserRole.ADMIN, newer)
        decision = guard.apply(UserRole.CITIZEN, older)

        assert decision.state is GuardState.AUTHORIZED
        assert guard.role is UserRole.ADMIN

    async def test_latest_resolution_wins(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_CELL))
        release_slow = asyncio.Event()

        async def slow():
            await release_slow.wait()
            return UserRole.CITIZEN

        slow_task = asyncio.create_task(guard.resolve(slow))
        await asyncio.sleep(0)

        fast_decision = await guard.resolve(role_provider(UserRole.ADMIN))
        release_slow.set()
        await slow_task

        assert fast_decision.allowed is True
        assert guard.state is GuardState.AUTHORIZED

    async def test_loading_while_new_identity_resolves(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_CELL))
        await guard.resolve(role_provider(UserRole.ADMIN))
        assert guard.state is GuardState.AUTHORIZED
        release = asyncio.Event()

        async def pending():
            await release.wait()
            return UserRole.CITIZEN

        task = asyncio.create_task(guard.resolve(pending))
        await asyncio.sleep(0)

        assert guard.state is GuardState.LOADING
        assert guard.set_requirement(PermissionRequirement(permission=Permission.VIEW_PROFILE)) == LOADING

        release.set()
        decision = await task

        assert decision.allowed is True
        assert guard.role is UserRole.CITIZEN

    def test_older_result_waits_for_newer_resolution(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_CELL))
        older = guard.begin()
        newer = guard.begin()

        assert guard.apply(UserRole.ADMIN, older) == LOADING
        assert guard.apply(UserRole.ADMIN, newer).allowed is True

    async def test_no_repeat_redirect_across_reloads(self):
        redirects: list[str] = []
        guard = PermissionGuard(
            PermissionRequirement(permission=Permission.CREATE_CELL),
            on_redirect=redirects.append,
        )

        await guard.resolve(role_provider(UserRole.CITIZEN))
        await guard.resolve(role_provider(UserRole.CITIZEN))

        assert redirects == ["/dashboard"]

    def test_set_requirement_reevaluates(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.VIEW_PROFILE))
        guard.apply(UserRole.CITIZEN)
        assert guard.state is GuardState.AUTHORIZED

        decision = guard.set_requirement(PermissionRequirement(permission=Permission.CREATE_CELL))

        assert decision.state is GuardState.UNAUTHORIZED

    def test_set_requirement_is_idempotent(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.CREATE_HOUSE))
        guard.apply(UserRole.ISIBO_LEADER)
        requirement = PermissionRequirement(permission=Permission.CREATE_HOUSE)

        assert guard.set_requirement(requirement) == guard.set_requirement(requirement)

    def test_set_requirement_before_resolution_stays_loading(self):
        guard = PermissionGuard(PermissionRequirement(permission=Permission.VIEW_PROFILE))

        decision = guard.set_requirement(PermissionRequirement(permission=Permission.CREATE_CELL))

        assert decision == LOADING

    def test_redirect_callback_runs_once_per_transition(self):
        redirects: list[str] = []
        guard = PermissionGuard(
            PermissionRequirement(permission=Permission.CREATE_CELL),
            fallback_url="/dashboard/locations",
            on_redirect=redirects.append,
        )

        guard.apply(UserRole.CITIZEN)
        guard.apply(UserRole.CITIZEN)
        assert redirects == ["/dashboard/locations"]

        guard.apply(UserRole.ADMIN)
        guard.apply(UserRole.CITIZEN)
        assert redirects == ["/dashboard/locations", "/dashboard/locations"]

    def test_no_callback_when_authorized(self):
        redirects: list[str] = []
        guard = PermissionGuard(
            PermissionRequirement(permission=Permission.CREATE_CELL),
            on_redirect=redirects.append,
        )

        guard.apply(UserRole.ADMIN)

        assert redirects == []
