"""Integration tests for authentication.

AuthService is exercised against in-memory repositories; the routes
are exercised with the service itself swapped out.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from communiserver.core.auth.backend import decode_token, hash_password, hash_token
from communiserver.core.auth.schemas import TokenPair
from communiserver.core.auth.service import AuthService
from communiserver.core.errors import UnauthorizedError
from communiserver.core.permissions.catalog import UserRole
from communiserver.modules.users.models import RefreshToken, User
from tests.factories.user import UserFactory


pytestmark = pytest.mark.integration


class FakeUsers:
    def __init__(self, *users: User) -> None:
        self.users = {u.id: u for u in users}

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email.lower() == email.lower()), None)


class FakeTokens:
    def __init__(self) -> None:
        self.tokens: dict[str, RefreshToken] = {}
        self.committed: list[str] = []

    async def create(self, token: RefreshToken) -> RefreshToken:
        token.revoked = False
        self.tokens[token.token_hash] = token
        return token

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        token = self.tokens.get(token_hash)
        return token if token and not token.revoked else None

    async def revoke(self, token: RefreshToken, commit: bool = False) -> None:
        token.revoked = True
        if commit:
            self.committed.append(token.token_hash)


@pytest.fixture
def leader() -> User:
    return UserFactory.build(
        email="leader@example.com",
        password_hash=hash_password("correct-horse-battery"),
        role=UserRole.VILLAGE_LEADER,
    )


@pytest.fixture
def service(leader: User) -> AuthService:
    svc = AuthService(db=None)  # type: ignore[arg-type]
    svc.user_repo = FakeUsers(leader)  # type: ignore[assignment]
    svc.token_repo = FakeTokens()  # type: ignore[assignment]
    return svc


class TestAuthService:
    """Tests for AuthService."""

    async def test_login_issues_tokens_with_role(self, service: AuthService, leader: User):
        user, tokens = await service.login("Leader@example.com", "correct-horse-battery")

        assert user is leader
        assert tokens.role is UserRole.VILLAGE_LEADER
        token_data = decode_token(tokens.access_token)
        assert token_data is not None
        assert token_data.role is UserRole.VILLAGE_LEADER
        assert hash_token(tokens.refresh_token) in service.token_repo.tokens

    async def test_login_wrong_password(self, service: AuthService):
        with pytest.raises(UnauthorizedError) as exc_info:
            await service.login("leader@example.com", "wrong-password")

        assert exc_info.value.error_code == "invalid_credentials"

    async def test_login_unknown_email(self, service: AuthService):
        with pytest.raises(UnauthorizedError) as exc_info:
            await service.login("nobody@example.com", "correct-horse-battery")

        assert exc_info.value.error_code == "invalid_credentials"

    async def test_login_inactive(self, service: AuthService, leader: User):
        leader.is_active = False

        with pytest.raises(UnauthorizedError) as exc_info:
            await service.login("leader@example.com", "correct-horse-battery")

        assert exc_info.value.error_code == "account_inactive"

    async def test_refresh_rotates_token(self, service: AuthService):
        _user, first = await service.login("leader@example.com", "correct-horse-battery")

        second = await service.refresh_tokens(first.refresh_token)

        assert second.refresh_token != first.refresh_token
        with pytest.raises(UnauthorizedError):
            await service.refresh_tokens(first.refresh_token)

    async def test_refresh_picks_up_role_change(self, service: AuthService, leader: User):
        _user, first = await service.login("leader@example.com", "correct-horse-battery")
        leader.role = UserRole.CELL_LEADER

        second = await service.refresh_tokens(first.refresh_token)

        assert second.role is UserRole.CELL_LEADER

    async def test_refresh_expired(self, service: AuthService):
        _user, tokens = await service.login("leader@example.com", "correct-horse-battery")
        stored = service.token_repo.tokens[hash_token(tokens.refresh_token)]
        stored.expires_at = datetime.now(UTC) - timedelta(seconds=1)

        with pytest.raises(UnauthorizedError) as exc_info:
            await service.refresh_tokens(tokens.refresh_token)

        assert exc_info.value.error_code == "token_expired"
        assert stored.revoked is True
        assert service.token_repo.committed == [stored.token_hash]

    async def test_refresh_for_inactive_user_commits_revocation(self, service: AuthService, leader: User):
        _user, tokens = await service.login("leader@example.com", "correct-horse-battery")
        stored = service.token_repo.tokens[hash_token(tokens.refresh_token)]
        leader.is_active = False

        with pytest.raises(UnauthorizedError) as exc_info:
            await service.refresh_tokens(tokens.refresh_token)

        assert exc_info.value.error_code == "user_invalid"
        assert stored.revoked is True
        assert service.token_repo.committed == [stored.token_hash]

    async def test_rotation_leaves_commit_to_the_request(self, service: AuthService):
        _user, tokens = await service.login("leader@example.com", "correct-horse-battery")

        await service.refresh_tokens(tokens.refresh_token)

        assert service.token_repo.committed == []

    async def test_logout_revokes(self, service: AuthService):
        _user, tokens = await service.login("leader@example.com", "correct-horse-battery")

        await service.logout(tokens.refresh_token)

        with pytest.raises(UnauthorizedError):
            await service.refresh_tokens(tokens.refresh_token)

    async def test_logout_unknown_token_is_ignored(self, service: AuthService):
        await service.logout("never-issued")


class StubAuthService:
    def __init__(self) -> None:
        self.logged_out: list[str] = []

    def _pair(self) -> TokenPair:
        return TokenPair(
            access_token="access",
            refresh_token="refresh",
            expires_in=3600,
            role=UserRole.ISIBO_LEADER,
        )

    async def login(self, email, password, user_agent=None, ip_address=None):
        if password != "correct-horse-battery":
            raise UnauthorizedError("Invalid email or password", error_code="invalid_credentials")
        return UserFactory.build(id=uuid4(), email=email), self._pair()

    async def refresh_tokens(self, refresh_token, user_agent=None, ip_address=None):
        return self._pair()

    async def logout(self, refresh_token):
        self.logged_out.append(refresh_token)


class TestAuthRoutes:
    """Tests for /auth routes."""

    @pytest.fixture
    def stub(self, app: FastAPI) -> StubAuthService:
        stub = StubAuthService()
        app.dependency_overrides[AuthService] = lambda: stub
        return stub

    async def test_login(self, client: AsyncClient, stub):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "leader@example.com", "password": "correct-horse-battery"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "access_token": "access",
            "refresh_token": "refresh",
            "token_type": "bearer",
            "expires_in": 3600,
            "role": "ISIBO_LEADER",
        }

    async def test_login_failure_is_problem_detail(self, client: AsyncClient, stub):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "leader@example.com", "password": "nope"},
        )

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/")
        assert response.json()["type"].endswith("/errors/invalid_credentials")

    async def test_refresh(self, client: AsyncClient, stub):
        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": "refresh"})

        assert response.status_code == 200
        assert response.json()["role"] == "ISIBO_LEADER"

    async def test_logout(self, client: AsyncClient, stub):
        response = await client.post("/api/v1/auth/logout", json={"refresh_token": "refresh"})

        assert response.status_code == 204
        assert stub.logged_out == ["refresh"]
