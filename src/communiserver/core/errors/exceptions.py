"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from collections.abc import Iterable
from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Unknown role", resource="role", resource_id="MAYOR")
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data."""

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when request data fails validation."""

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when authentication is required but not provided or invalid."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when user lacks permission to access a resource.

    Example:
        raise ForbiddenError(
            "Insufficient permissions",
            details={"required_permissions": ["CREATE_CELL"]}
        )
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class PermissionDeniedError(ForbiddenError):
    """Raised when the caller's role does not satisfy a permission check."""

    error_code = "permission_denied"

    def __init__(
        self,
        message: str | None = None,
        required: Iterable[str] = (),
        mode: str | None = None,
        role: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        details["required_permissions"] = [str(p) for p in required]
        if mode:
            details["mode"] = mode
        if role:
            details["role"] = role
        super().__init__(message=message, details=details, **kwargs)


class BadRequestError(AppException):
    """Raised for general client errors."""

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


class GuardRedirect(Exception):
    """Raised by a page guard to send the client to its fallback location.

    Not an AppException: it is rendered as a redirect, not a problem detail.
    """

    status_code: int = 307

    def __init__(self, location: str, reason: str = "unauthorized") -> None:
        self.location = location
        self.reason = reason
        super().__init__(f"Redirecting to {location} ({reason})")
