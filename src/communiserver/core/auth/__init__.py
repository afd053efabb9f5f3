"""Authentication: JWT and password handling, and the current identity.

Routes and the service live in their own modules and are imported
directly, so that importing this package stays cheap.
"""

from communiserver.core.auth.backend import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    verify_password,
)
from communiserver.core.auth.dependencies import (
    CurrentRole,
    CurrentUser,
    OptionalUser,
    get_current_role,
    get_current_user,
    get_optional_user,
)
from communiserver.core.auth.middleware import IdentityContextMiddleware, RequestIdMiddleware
from communiserver.core.auth.schemas import TokenData, TokenPair


__all__ = [
    "CurrentRole",
    "CurrentUser",
    "IdentityContextMiddleware",
    "OptionalUser",
    "RequestIdMiddleware",
    "TokenData",
    "TokenPair",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "get_current_role",
    "get_current_user",
    "get_optional_user",
    "hash_password",
    "hash_token",
    "verify_password",
]
