"""Request logging middleware.

Logs every HTTP request and its outcome through structlog. Identity
fields (user id, role) are picked up from ``request.state`` when the
identity middleware managed to decode a bearer token.
"""

import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs all HTTP requests and responses.

    Logs include the method, path, status code, duration, request id and,
    when authenticated, the user id and role. Health and docs paths are
    skipped by default.
    """

    def __init__(
        self,
        app: Any,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or [
            "/health/live",
            "/health/ready",
            "/docs",
            "/redoc",
            "/openapi.json",
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        start_time = time.perf_counter()

        request_id = getattr(request.state, "request_id", None)
        method = request.method
        path = request.url.path

        log_data: dict[str, Any] = {
            "method": method,
            "path": path,
            "client_ip": get_client_ip(request),
        }
        if request.url.query:
            log_data["query"] = str(request.url.query)
        if request_id:
            log_data["request_id"] = request_id

        logger.info("request_started", **log_data)

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "request_failed",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error=str(exc),
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        completion_data: dict[str, Any] = {
            "method": method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
        if request_id:
            completion_data["request_id"] = request_id

        user_id = getattr(request.state, "user_id", None)
        role = getattr(request.state, "role", None)
        if user_id:
            completion_data["user_id"] = str(user_id)
        if role:
            completion_data["role"] = str(role)

        if response.status_code >= 500:
            logger.error("request_completed", **completion_data)
        elif response.status_code >= 400:
            logger.warning("request_completed", **completion_data)
        else:
            logger.info("request_completed", **completion_data)

        return response


def get_client_ip(request: Request) -> str | None:
    """Extract the real client IP from a request.

    The portal UI proxies every call to this service, so the
    X-Forwarded-For header is checked before the socket address.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # first entry is the original client
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return None
