"""Permission decorators for route protection.

These decorators wrap async FastAPI route handlers that receive the
authenticated user as a ``current_user`` keyword argument.
"""

from collections.abc import Awaitable, Callable, Iterable
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast

import structlog

from communiserver.core.errors import PermissionDeniedError, UnauthorizedError
from communiserver.core.permissions.catalog import Permission
from communiserver.core.permissions.checker import CombineMode, PermissionRequirement


if TYPE_CHECKING:
    from fastapi import Request


logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")

Decorator = Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]


def enforce_requirement(
    user: Any,
    requirement: PermissionRequirement,
    request: "Request | None" = None,
) -> None:
    """Raise unless the user's role satisfies the requirement.

    Raises:
        UnauthorizedError: If there is no authenticated user
        PermissionDeniedError: If the role does not satisfy the requirement
    """
    if user is None:
        raise UnauthorizedError(
            "Authentication required",
            error_code="auth_required",
        )

    role = getattr(user, "role", None)
    if requirement.is_satisfied_by(role):
        return

    required = requirement.describe()
    mode = CombineMode.ANY if requirement.any_permissions and not requirement.all_permissions else CombineMode.ALL
    logger.warning(
        "permission_denied",
        user_id=str(getattr(user, "id", "")) or None,
        role=str(role) if role else None,
        required_permissions=required,
        mode=str(mode),
        endpoint=request.url.path if request else "unknown",
    )

    if mode is CombineMode.ANY:
        message = f"Missing required permission. Need one of: {', '.join(required)}"
    else:
        message = f"Missing required permissions: {', '.join(required)}"

    raise PermissionDeniedError(
        message,
        required=required,
        mode=str(mode),
    )


def _protect(requirement: PermissionRequirement) -> Decorator[P, R]:
    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            user = kwargs.get("current_user")
            request = cast("Request | None", kwargs.get("request"))
            enforce_requirement(user, requirement, request)
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_permission(permission: Permission) -> Decorator[P, R]:
    """Decorator that requires a specific permission to access a route.

    Usage:
        @router.post("/cells")
        @require_permission(Permission.CREATE_CELL)
        async def create_cell(data: CellCreate, current_user: CurrentUser):
            ...

    Raises:
        PermissionDeniedError: If the user's role lacks the permission
    """
    return _protect(PermissionRequirement(permission=permission))


def require_any_permission(permissions: Iterable[Permission]) -> Decorator[P, R]:
    """Decorator that requires any one of the specified permissions.

    Usage:
        @router.get("/cells")
        @require_any_permission([Permission.VIEW_ALL_CELLS, Permission.CREATE_CELL])
        async def list_cells(current_user: CurrentUser):
            ...

    Raises:
        ValueError: If ``permissions`` is empty, which would leave the
            route unguarded
    """
    return _protect(
        PermissionRequirement(any_permissions=tuple(permissions), require_non_empty=True)
    )


def require_all_permissions(permissions: Iterable[Permission]) -> Decorator[P, R]:
    """Decorator that requires all of the specified permissions.

    Usage:
        @router.post("/houses/{house_id}/members")
        @require_all_permissions([Permission.ADD_CITIZENS, Permission.ASSIGN_CITIZENS_TO_HOUSE])
        async def add_member(house_id: UUID, current_user: CurrentUser):
            ...

    Raises:
        ValueError: If ``permissions`` is empty
    """
    return _protect(
        PermissionRequirement(all_permissions=tuple(permissions), require_non_empty=True)
    )
