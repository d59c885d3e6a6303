"""Tests for CacheService with a mocked Redis client."""

import json
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from accounts.infrastructure.cache.keys import token_key, user_key, users_all_key
from accounts.infrastructure.cache.redis_cache import CacheService


@pytest.fixture
def redis_client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def cache(settings, redis_client) -> CacheService:
    return CacheService(settings, redis_client=redis_client)


def test_key_formats() -> None:
    assert user_key(42) == "user:42"
    assert users_all_key() == "users:all"
    assert token_key("a.b.c") == "token:a.b.c"


def test_token_key_rejects_separator() -> None:
    with pytest.raises(ValueError):
        token_key("a:b")


def test_injected_client_is_available(cache: CacheService) -> None:
    assert cache.is_available()


async def test_service_without_client_is_soft(settings) -> None:
    cache = CacheService(settings)
    assert not cache.is_available()
    assert await cache.get("user:1") is None
    assert await cache.set("user:1", {"id": 1}) is False
    assert await cache.delete("user:1") is False


async def test_get_decodes_json(cache: CacheService, redis_client: AsyncMock) -> None:
    redis_client.get.return_value = json.dumps({"id": 1})
    assert await cache.get("user:1") == {"id": 1}
    redis_client.get.assert_awaited_once_with("user:1")


async def test_get_miss_returns_none(cache: CacheService, redis_client: AsyncMock) -> None:
    redis_client.get.return_value = None
    assert await cache.get("user:1") is None


async def test_set_uses_setex_with_ttl(cache: CacheService, redis_client: AsyncMock) -> None:
    assert await cache.set("user:1", {"id": 1}, ttl=300) is True
    redis_client.setex.assert_awaited_once_with("user:1", 300, json.dumps({"id": 1}))


async def test_delete_sends_single_multi_key_command(
    cache: CacheService, redis_client: AsyncMock
) -> None:
    assert await cache.delete("user:1", "users:all") is True
    redis_client.delete.assert_awaited_once_with("user:1", "users:all")


async def test_delete_failure_is_soft(cache: CacheService, redis_client: AsyncMock) -> None:
    redis_client.delete.side_effect = redis.ConnectionError("down")
    assert await cache.delete("user:1", "users:all") is False


async def test_get_error_is_soft(cache: CacheService, redis_client: AsyncMock) -> None:
    redis_client.get.side_effect = redis.RedisError("bad")
    assert await cache.get("user:1") is None


async def test_disconnect_leaves_injected_client_open(
    cache: CacheService, redis_client: AsyncMock
) -> None:
    await cache.disconnect()
    redis_client.aclose.assert_not_awaited()
    assert not cache.is_available()
