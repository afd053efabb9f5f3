"""Error handling module with RFC 7807 Problem Details."""

from communiserver.core.errors.exceptions import (
    AppException,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    GuardRedirect,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
    ValidationError,
)
from communiserver.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    "AppException",
    "BadRequestError",
    "ConflictError",
    "FieldError",
    "ForbiddenError",
    "GuardRedirect",
    "NotFoundError",
    "PermissionDeniedError",
    "ProblemDetail",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]
