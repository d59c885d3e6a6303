"""SqlUserRepository integration tests.

SQLite (aiosqlite) tests always run; the PostgreSQL test needs TEST_DATABASE_URL.
"""

import os
import uuid

import pytest

from accounts.application.dtos.user import UserCreate
from accounts.domain.enums import UserStatus
from accounts.domain.exceptions import (
    DuplicateEmailException,
    ResourceNotFoundException,
    UserAlreadyExistsException,
)
from accounts.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
    create_tables,
)
from accounts.infrastructure.persistence.repositories import SqlUserRepository


@pytest.fixture
async def repo(make_settings, tmp_path):
    settings = make_settings(
        database_backend="sql",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}",
    )
    engine = build_engine(settings)
    await create_tables(engine)
    yield SqlUserRepository(build_session_factory(engine))
    await engine.dispose()


def _data(username: str, **extra) -> UserCreate:
    return UserCreate(
        username=username, password="x", email=f"{username}@example.com", **extra
    )


async def test_create_and_read_back(repo: SqlUserRepository) -> None:
    created = await repo.create_user(_data("alice", nickname="Alice"), "hashed")
    assert created.id == 1
    assert created.status is UserStatus.ACTIVE
    assert created.created_at.tzinfo is not None

    found = await repo.get_by_id(created.id)
    assert found is not None
    assert found.username == "alice"
    assert found.nickname == "Alice"
    assert (await repo.get_by_email("alice@example.com")).id == created.id
    assert (await repo.get_by_username("alice")).id == created.id

    record = await repo.get_auth_record("alice")
    assert record.hashed_password == "hashed"


async def test_duplicates_are_rejected(repo: SqlUserRepository) -> None:
    await repo.create_user(_data("alice"), "hashed")
    with pytest.raises(UserAlreadyExistsException):
        await repo.create_user(_data("alice"), "hashed")
    bob = await repo.create_user(_data("bob"), "hashed")
    with pytest.raises(DuplicateEmailException):
        await repo.update_user(bob.id, {"email": "alice@example.com"})


async def test_update_and_soft_delete(repo: SqlUserRepository) -> None:
    user = await repo.create_user(_data("alice"), "hashed")
    updated = await repo.update_user(user.id, {"nickname": "Al", "status": 0})
    assert updated.nickname == "Al"
    assert updated.status is UserStatus.DISABLED

    await repo.soft_delete_user(user.id)
    assert await repo.get_by_id(user.id) is None
    with pytest.raises(ResourceNotFoundException):
        await repo.soft_delete_user(user.id)
    with pytest.raises(ResourceNotFoundException):
        await repo.update_user(user.id, {"nickname": "x"})


async def test_list_filters_orders_and_counts(repo: SqlUserRepository) -> None:
    for name in ("alice", "bob", "carol"):
        await repo.create_user(_data(name), "hashed")
    await repo.update_user(2, {"status": 0})

    items, total = await repo.list_users(0, 2)
    assert total == 3
    assert [u.username for u in items] == ["carol", "bob"]

    items, total = await repo.list_users(0, 10, keyword="CAR")
    assert ([u.username for u in items], total) == (["carol"], 1)

    items, total = await repo.list_users(0, 10, status=UserStatus.ACTIVE)
    assert sorted(u.username for u in items) == ["alice", "carol"]


@pytest.fixture
async def pg_repo(make_settings):
    """Repository on a real PostgreSQL database named by TEST_DATABASE_URL."""
    url = os.environ.get("TEST_DATABASE_URL")
    if not url:
        pytest.skip("Postgres not configured: set TEST_DATABASE_URL=postgresql+asyncpg://...")
    engine = build_engine(make_settings(database_backend="sql", database_url=url))
    await create_tables(engine)
    yield SqlUserRepository(build_session_factory(engine))
    await engine.dispose()


@pytest.mark.requires_db
async def test_postgres_create_and_search(pg_repo: SqlUserRepository) -> None:
    name = f"pg{uuid.uuid4().hex[:10]}"
    created = await pg_repo.create_user(_data(name), "hashed")
    items, total = await pg_repo.list_users(0, 10, keyword=name.upper())
    assert total == 1
    assert items[0].id == created.id
    await pg_repo.soft_delete_user(created.id)
