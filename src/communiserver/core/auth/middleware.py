"""Request identity and tracing middleware.

- ``RequestIdMiddleware`` gives every request an id and echoes it back.
- ``IdentityContextMiddleware`` decodes a bearer token, if present, and
  exposes the user id and role on ``request.state`` and in the
  structlog context. It never rejects a request; authentication is
  enforced by the route dependencies.
"""

import uuid
from typing import TYPE_CHECKING

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from communiserver.core.auth.backend import decode_token


if TYPE_CHECKING:
    from starlette.types import ASGIApp


logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class IdentityContextMiddleware(BaseHTTPMiddleware):
    """Bind the caller's identity to the request for logging."""

    def __init__(
        self,
        app: "ASGIApp",
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or [
            "/health",
            "/docs",
            "/redoc",
            "/openapi.json",
            "/api/v1/auth/login",
            "/api/v1/auth/refresh",
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token_data = decode_token(auth_header.split(" ", 1)[1])
            if token_data:
                request.state.user_id = token_data.user_id
                request.state.role = token_data.role
                structlog.contextvars.bind_contextvars(
                    user_id=str(token_data.user_id),
                    role=str(token_data.role) if token_data.role else None,
                )

        try:
            return await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("user_id", "role")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assign a request id, honouring one supplied by the proxy."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
