"""Access API routes: the permission catalog, role map and checks."""

from fastapi import APIRouter, Query

from communiserver.core.auth.dependencies import CurrentRole, CurrentUser
from communiserver.core.errors import NotFoundError
from communiserver.core.permissions.catalog import Permission, UserRole, parse_role
from communiserver.core.permissions.checker import get_permissions_for_role
from communiserver.core.permissions.matrix import ROLE_PERMISSIONS
from communiserver.modules.access.dependencies import GuardedPage
from communiserver.modules.access.navigation import (
    LOCATION_TABS,
    SIDEBAR_ITEMS,
    NavItem,
    visible_items,
)
from communiserver.modules.access.pages import normalize_path, resolve_page
from communiserver.modules.access.schemas import (
    AccessCheckRequest,
    AccessCheckResponse,
    MyAccessResponse,
    NavigationResponse,
    NavItemResponse,
    PageDecisionResponse,
    PermissionCatalogResponse,
    RoleMapResponse,
    RolePermissionsResponse,
)


router = APIRouter(prefix="/access", tags=["access"])

# Mounted without the API prefix, so paths line up with the portal's pages.
pages_router = APIRouter(prefix="/dashboard", tags=["pages"])


def _role_permissions(role: UserRole) -> RolePermissionsResponse:
    return RolePermissionsResponse(role=role, permissions=sorted(ROLE_PERMISSIONS[role]))


def _nav(items: list[NavItem]) -> list[NavItemResponse]:
    return [NavItemResponse(key=item.key, label=item.label, href=item.href) for item in items]


@router.get(
    "/permissions",
    response_model=PermissionCatalogResponse,
    summary="Permission catalog",
)
async def list_permissions() -> PermissionCatalogResponse:
    """List every permission."""
    return PermissionCatalogResponse(permissions=list(Permission))


@router.get(
    "/roles",
    response_model=RoleMapResponse,
    summary="Role permission map",
)
async def list_roles() -> RoleMapResponse:
    """List every role with the permissions it grants."""
    return RoleMapResponse(roles=[_role_permissions(role) for role in UserRole])


@router.get(
    "/roles/{role}/permissions",
    response_model=RolePermissionsResponse,
    summary="Permissions of a role",
)
async def get_role_permissions(role: str) -> RolePermissionsResponse:
    """Get the permissions one role grants.

    Raises:
        NotFoundError: If the role is unknown
    """
    parsed = parse_role(role)
    if parsed is None:
        raise NotFoundError("Role not found", resource="role", resource_id=role)
    return _role_permissions(parsed)


@router.get(
    "/me",
    response_model=MyAccessResponse,
    summary="Current user's access",
)
async def get_my_access(current_user: CurrentUser) -> MyAccessResponse:
    return MyAccessResponse(
        user_id=current_user.id,
        role=current_user.role,
        permissions=sorted(get_permissions_for_role(current_user.role)),
    )


@router.post(
    "/check",
    response_model=AccessCheckResponse,
    summary="Check permissions",
    description="Evaluate permissions against the current user's role without side effects.",
)
async def check_access(
    data: AccessCheckRequest,
    role: CurrentRole,
) -> AccessCheckResponse:
    allowed = data.to_requirement().is_satisfied_by(role)
    return AccessCheckResponse(allowed=allowed, role=role)


@router.get(
    "/navigation",
    response_model=NavigationResponse,
    summary="Visible navigation",
)
async def get_navigation(role: CurrentRole) -> NavigationResponse:
    """Sidebar entries and location tabs the current user may see."""
    return NavigationResponse(
        sidebar=_nav(visible_items(SIDEBAR_ITEMS, role)),
        location_tabs=_nav(visible_items(LOCATION_TABS, role)),
    )


@router.get(
    "/pages/resolve",
    response_model=PageDecisionResponse,
    summary="Resolve a dashboard page",
    description="Returns whether the current user may open a dashboard path, and where they would be sent if not.",
)
async def resolve_dashboard_page(
    current_user: CurrentUser,
    path: str = Query(..., min_length=1),
) -> PageDecisionResponse:
    normalized = normalize_path(path)
    decision = resolve_page(normalized, current_user.role)
    return PageDecisionResponse(
        path=normalized,
        state=decision.state,
        redirect_to=decision.redirect_to,
    )


@pages_router.get(
    "/{page_path:path}",
    response_model=PageDecisionResponse,
    summary="Open a dashboard page",
    description="Redirects to the login page without a session, or to the fallback page when a guard fails.",
)
async def open_dashboard_page(page_path: str, decision: GuardedPage) -> PageDecisionResponse:
    return PageDecisionResponse(
        path=normalize_path(f"/dashboard/{page_path}"),
        state=decision.state,
    )
