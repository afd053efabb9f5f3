"""FastAPI dependencies for authentication.

This module is the identity provider for the permission layer: it
turns the bearer token on a request into the current user, whose
``role`` the permission checks read.
"""

from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from communiserver.api.dependencies import DBSession
from communiserver.core.auth.backend import decode_token
from communiserver.core.auth.schemas import TokenData
from communiserver.core.errors import ForbiddenError, UnauthorizedError
from communiserver.core.permissions.catalog import UserRole


bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_data(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenData:
    """Extract and validate token data from the Authorization header.

    Raises:
        UnauthorizedError: If token is missing, invalid or not an access token
    """
    if not credentials:
        raise UnauthorizedError(
            "Missing authentication token",
            error_code="missing_token",
        )

    token_data = decode_token(credentials.credentials)
    if not token_data:
        raise UnauthorizedError(
            "Invalid or expired token",
            error_code="invalid_token",
        )

    if token_data.type != "access":
        raise UnauthorizedError(
            "Invalid token type",
            error_code="invalid_token_type",
        )

    return token_data


async def get_current_user(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    db: DBSession,
) -> Any:  # Returns User, but use Any to avoid circular import
    """Get the currently authenticated user.

    The role is read from the stored user, not the token claim, so a
    role change takes effect on the next request.

    Raises:
        UnauthorizedError: If user not found
        ForbiddenError: If the account is deactivated
    """
    from communiserver.modules.users.repos import UserRepository  # noqa: PLC0415

    repo = UserRepository(db)
    user = await repo.get_by_id(token_data.user_id)

    if not user:
        raise UnauthorizedError(
            "User not found",
            error_code="user_not_found",
        )

    if not user.is_active:
        raise ForbiddenError(
            "User account is deactivated",
            error_code="user_inactive",
        )

    return user


async def get_current_role(
    user: Annotated[Any, Depends(get_current_user)],
) -> UserRole | None:
    """Get the current user's role."""
    return user.role


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: DBSession,
) -> Any | None:
    """Get the current user if authenticated, None otherwise.

    Used by page routes, which redirect instead of failing with 401.
    """
    if not credentials:
        return None

    token_data = decode_token(credentials.credentials)
    if not token_data or token_data.type != "access":
        return None

    from communiserver.modules.users.repos import UserRepository  # noqa: PLC0415

    repo = UserRepository(db)
    user = await repo.get_by_id(token_data.user_id)

    if not user or not user.is_active:
        return None

    return user


# Use Any for User type to avoid circular imports at runtime
CurrentUser = Annotated[Any, Depends(get_current_user)]
CurrentRole = Annotated[UserRole | None, Depends(get_current_role)]
OptionalUser = Annotated[Any | None, Depends(get_optional_user)]
