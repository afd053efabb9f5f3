"""FastAPI dependencies for permission enforcement.

Two flavours, matching the two kinds of callers:

- ``RequirePermissions`` protects API routes and rejects with 403.
- ``guard_page`` protects page routes and redirects, the way the portal
  UI sends users away from screens they may not open.
"""

from collections.abc import Iterable
from typing import Any

from fastapi import Request

from communiserver.config import settings
from communiserver.core.auth.dependencies import CurrentUser
from communiserver.core.errors import GuardRedirect
from communiserver.core.permissions.catalog import Permission
from communiserver.core.permissions.checker import PermissionRequirement, RoleLike
from communiserver.core.permissions.decorators import enforce_requirement
from communiserver.core.permissions.guard import GuardDecision, GuardState, PermissionGuard


class RequirePermissions:
    """Dependency that enforces a permission requirement on the current user.

    Usage:
        @router.get(
            "/users/{user_id}",
            dependencies=[Depends(RequirePermissions(Permission.VIEW_LEADERS))],
        )

    Or take the user from it directly:
        user: Annotated[User, Depends(RequirePermissions(Permission.CREATE_CELL))]
    """

    def __init__(
        self,
        permission: Permission | None = None,
        *,
        any_permissions: Iterable[Permission] | None = None,
        all_permissions: Iterable[Permission] | None = None,
    ) -> None:
        self.requirement = PermissionRequirement(
            permission=permission,
            any_permissions=tuple(any_permissions) if any_permissions is not None else None,
            all_permissions=tuple(all_permissions) if all_permissions is not None else None,
            require_non_empty=True,
        )
        if not self.requirement.is_configured:
            raise ValueError("RequirePermissions needs at least one permission")

    async def __call__(self, request: Request, current_user: CurrentUser) -> Any:
        enforce_requirement(current_user, self.requirement, request)
        return current_user


async def guard_page(
    user: Any | None,
    guards: Iterable[PermissionGuard],
) -> GuardDecision:
    """Run page guards, outermost first, for an optionally authenticated user.

    Args:
        user: The current user, or None when there is no session
        guards: Guards enclosing the page, outermost first

    Returns:
        The AUTHORIZED decision when every guard passes

    Raises:
        GuardRedirect: To the login page without a session, or to the
            first failing guard's fallback location
    """
    if user is None:
        raise GuardRedirect(settings.guard_login_url, reason="unauthenticated")

    async def current_role() -> RoleLike:
        return getattr(user, "role", None)

    decision = GuardDecision(GuardState.AUTHORIZED)
    for guard in guards:
        decision = await guard.resolve(current_role)
        if not decision.allowed:
            raise GuardRedirect(decision.redirect_to or settings.guard_fallback_url)

    return decision
