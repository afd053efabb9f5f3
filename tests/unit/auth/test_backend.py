"""Unit tests for auth backend (JWT and password handling)."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from communiserver.config import settings
from communiserver.core.auth.backend import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    verify_password,
)
from communiserver.core.permissions.catalog import UserRole


pytestmark = pytest.mark.unit


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password_returns_bcrypt_hash(self):
        hashed = hash_password("mysecretpassword")

        assert hashed != "mysecretpassword"
        assert hashed.startswith("$2b$")

    def test_verify_password(self):
        hashed = hash_password("mysecretpassword")

        assert verify_password("mysecretpassword", hashed) is True
        assert verify_password("wrongpassword", hashed) is False


class TestAccessTokens:
    """Tests for JWT access tokens."""

    def test_round_trip_carries_role(self):
        user_id = uuid4()
        token = create_access_token(user_id, UserRole.VILLAGE_LEADER)

        data = decode_token(token)

        assert data is not None
        assert data.user_id == user_id
        assert data.role is UserRole.VILLAGE_LEADER
        assert data.type == "access"
        assert data.jti

    def test_claims(self):
        token = create_access_token(uuid4(), UserRole.ADMIN)
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])

        assert {"sub", "role", "type", "exp", "iat", "jti"} <= set(payload)
        assert payload["role"] == "ADMIN"

    def test_unknown_role_claim_decodes_to_none(self):
        token = create_access_token(uuid4(), "MAYOR")

        data = decode_token(token)

        assert data is not None
        assert data.role is None

    def test_expired_token_is_rejected(self):
        token = create_access_token(uuid4(), UserRole.CITIZEN, expires_delta=timedelta(seconds=-1))

        assert decode_token(token) is None

    def test_wrong_secret_is_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "ADMIN", "exp": 9999999999},
            "another-secret-that-is-long-enough-to-pass",
            algorithm=settings.jwt_algorithm,
        )

        assert decode_token(token) is None

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_garbage_is_rejected(self, token):
        assert decode_token(token) is None

    def test_additional_claims(self):
        token = create_access_token(uuid4(), UserRole.CITIZEN, additional_claims={"type": "refresh"})

        data = decode_token(token)

        assert data is not None
        assert data.type == "refresh"


class TestRefreshTokens:
    """Tests for opaque refresh tokens."""

    def test_refresh_tokens_are_unique(self):
        assert create_refresh_token() != create_refresh_token()

    def test_hash_token_is_stable_sha256(self):
        token = create_refresh_token()

        assert hash_token(token) == hash_token(token)
        assert len(hash_token(token)) == 64
