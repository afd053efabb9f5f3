"""Authentication API routes: login, token refresh and logout."""

from fastapi import APIRouter, Request, status

from communiserver.core.auth.schemas import TokenPair
from communiserver.core.auth.service import AuthSvc
from communiserver.core.logging import get_client_ip
from communiserver.modules.users.schemas import (
    LoginRequest,
    RefreshTokenRequest,
    TokenResponse,
)


router = APIRouter(prefix="/auth", tags=["auth"])


def _to_response(tokens: TokenPair) -> TokenResponse:
    return TokenResponse(**tokens.model_dump())


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="Authenticate to receive access and refresh tokens. The response includes the user's role.",
)
async def login(
    data: LoginRequest,
    service: AuthSvc,
    request: Request,
) -> TokenResponse:
    """Login with email and password."""
    _user, tokens = await service.login(
        email=data.email,
        password=data.password,
        user_agent=request.headers.get("User-Agent"),
        ip_address=get_client_ip(request),
    )
    return _to_response(tokens)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token",
    description="Use a refresh token to obtain a new token pair. The old refresh token is revoked.",
)
async def refresh_token(
    data: RefreshTokenRequest,
    service: AuthSvc,
    request: Request,
) -> TokenResponse:
    """Refresh the access token."""
    tokens = await service.refresh_tokens(
        refresh_token=data.refresh_token,
        user_agent=request.headers.get("User-Agent"),
        ip_address=get_client_ip(request),
    )
    return _to_response(tokens)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Revoke the refresh token of the current session.",
)
async def logout(
    data: RefreshTokenRequest,
    service: AuthSvc,
) -> None:
    """Logout by revoking the refresh token."""
    await service.logout(data.refresh_token)
