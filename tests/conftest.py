"""Pytest configuration and fixtures for the account service.

HTTP tests build the app with create_app() against the in-memory store and
an in-process fake cache, so no Redis or database is needed. SQL
repository tests use SQLite through aiosqlite.
"""

import os
from collections.abc import Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

# Settings are validated on first get_settings(); set required env first.
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-account-service")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("DATABASE_BACKEND", "memory")

from accounts.core.config import Settings, get_settings  # noqa: E402
from accounts.infrastructure.persistence.repositories import (  # noqa: E402
    InMemoryUserRepository,
)
from accounts.infrastructure.security.jwt import CredentialIssuer  # noqa: E402
from accounts.main import create_app  # noqa: E402

TEST_SECRET = "test-secret-key-for-account-service"
TEST_PASSWORD = "secret123"


class FakeCache:
    """In-process stand-in for CacheService recording every call."""

    def __init__(self, *, available: bool = True, fail_deletes: bool = False) -> None:
        self.store: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}
        self.available = available
        self.fail_deletes = fail_deletes
        self.delete_calls: list[tuple[str, ...]] = []
        self.set_calls: list[str] = []

    def is_available(self) -> bool:
        return self.available

    async def get(self, key: str) -> Any | None:
        if not self.available:
            return None
        return self.store.get(key)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        if not self.available:
            return False
        self.set_calls.append(key)
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys: str) -> bool:
        self.delete_calls.append(keys)
        if not self.available or self.fail_deletes:
            return False
        for key in keys:
            self.store.pop(key, None)
            self.ttls.pop(key, None)
        return True


class FakeTerminator:
    """Records terminate(code) calls instead of exiting the test process."""

    def __init__(self) -> None:
        self.codes: list[int] = []

    def __call__(self, code: int) -> None:
        self.codes.append(code)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings for the in-memory store with overrides."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "secret_key": TEST_SECRET,
            "redis_enabled": False,
            "database_backend": "memory",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def terminator() -> FakeTerminator:
    return FakeTerminator()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def issuer(settings: Settings) -> CredentialIssuer:
    return CredentialIssuer.from_settings(settings)


@pytest.fixture
def app(settings, fake_cache, user_repository, terminator):
    """Application wired to the in-memory store, fake cache and fake terminator."""
    return create_app(
        settings,
        cache=fake_cache,
        user_repository=user_repository,
        terminate=terminator,
    )


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def registered_user(client: AsyncClient) -> dict[str, Any]:
    """Create 'alice' through the API and return the created payload."""
    response = await client.post(
        "/api/v1/users",
        json={
            "username": "alice",
            "password": TEST_PASSWORD,
            "email": "alice@example.com",
            "nickname": "Alice",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
async def auth_headers(client: AsyncClient, registered_user) -> dict[str, str]:
    """Log in as the registered user and return bearer headers."""
    response = await client.post(
        "/api/v1/login", json={"username": "alice", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200, response.text
    token = response.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}
