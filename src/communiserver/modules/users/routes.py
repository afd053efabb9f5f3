"""User API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from communiserver.core.auth.dependencies import CurrentUser
from communiserver.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from communiserver.core.permissions.catalog import Permission, UserRole
from communiserver.core.permissions.decorators import require_permission
from communiserver.core.permissions.dependencies import RequirePermissions
from communiserver.modules.users.schemas import (
    UserCreate,
    UserListResponse,
    UserProfileResponse,
    UserResponse,
)
from communiserver.modules.users.services import UserService, UserSvc


router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/me",
    response_model=UserProfileResponse,
    summary="Current user",
    description="Returns the authenticated user with the permissions granted by their role.",
)
async def get_me(current_user: CurrentUser) -> UserProfileResponse:
    """Get the current user's profile."""
    user = UserResponse.model_validate(current_user)
    return UserProfileResponse(
        **user.model_dump(),
        permissions=UserService.permissions_of(current_user),
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Creates a user. The role being assigned decides which permission the caller needs.",
)
async def create_user(
    data: UserCreate,
    service: UserSvc,
    current_user: CurrentUser,
) -> UserResponse:
    """Create a user with a role."""
    user = await service.create_user(data, requester=current_user)
    return UserResponse.model_validate(user)


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
)
@require_permission(Permission.VIEW_LEADERS)
async def list_users(
    service: UserSvc,
    current_user: CurrentUser,  # noqa: ARG001
    request: Request,  # noqa: ARG001
    role: UserRole | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> UserListResponse:
    """List users, optionally filtered by role."""
    users, total = await service.list_users(role=role, page=page, page_size=page_size)
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user",
    dependencies=[Depends(RequirePermissions(Permission.VIEW_LEADERS))],
)
async def get_user(user_id: UUID, service: UserSvc) -> UserResponse:
    """Get a single user."""
    return UserResponse.model_validate(await service.get_user(user_id))
