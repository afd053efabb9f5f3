"""Pytest configuration and shared fixtures.

The API tests run without a database: the identity dependencies are
overridden with in-memory users, so only the permission layer decides
what a request may do.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from communiserver.core.auth.dependencies import get_current_user, get_optional_user
from communiserver.core.permissions.catalog import UserRole
from communiserver.main import create_app
from communiserver.modules.users.models import User
from tests.factories.user import UserFactory


@pytest.fixture
def app() -> FastAPI:
    """A fresh application per test, so overrides never leak."""
    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def login_as(app: FastAPI) -> Callable[..., User]:
    """Make every request in the test come from a user with the given role.

    Usage:
        user = login_as(UserRole.CELL_LEADER)
    """

    def _login(role: UserRole | str | None = UserRole.CITIZEN, **overrides: Any) -> User:
        user = UserFactory.build(role=role, **overrides)
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user
        return user

    return _login


@pytest.fixture
def anonymous(app: FastAPI) -> None:
    """Requests carry no session."""
    app.dependency_overrides[get_optional_user] = lambda: None
