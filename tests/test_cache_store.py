"""Tests for the address cache stores (in-memory TTL and Redis)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
import redis.asyncio as aioredis

from src.integrations.viacep.cache import InMemoryTTLCache, RedisCacheStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryTTLCache:
    @pytest.mark.asyncio()
    async def test_miss(self):
        cache = InMemoryTTLCache(clock=FakeClock())
        assert await cache.get("viacep:04850280") is None

    @pytest.mark.asyncio()
    async def test_hit_before_expiry(self):
        clock = FakeClock()
        cache = InMemoryTTLCache(clock=clock)
        await cache.set("k", "v", 10)
        clock.now = 9.99
        assert await cache.get("k") == "v"

    @pytest.mark.asyncio()
    async def test_expired_at_ttl_boundary(self):
        clock = FakeClock()
        cache = InMemoryTTLCache(clock=clock)
        await cache.set("k", "v", 10)
        clock.now = 10
        assert await cache.get("k") is None

    @pytest.mark.asyncio()
    async def test_set_overwrites_and_resets_ttl(self):
        clock = FakeClock()
        cache = InMemoryTTLCache(clock=clock)
        await cache.set("k", "old", 10)
        clock.now = 8
        await cache.set("k", "new", 10)
        clock.now = 15
        assert await cache.get("k") == "new"
        assert len(cache) == 1


class TestRedisCacheStore:
    @pytest.mark.asyncio()
    async def test_get_decodes_bytes(self):
        redis = AsyncMock()
        redis.get.return_value = b'{"cep": "04850-280"}'
        store = RedisCacheStore(redis)

        assert await store.get("viacep:04850280") == '{"cep": "04850-280"}'
        redis.get.assert_awaited_once_with("viacep:04850280")

    @pytest.mark.asyncio()
    async def test_get_miss(self):
        redis = AsyncMock()
        redis.get.return_value = None
        assert await RedisCacheStore(redis).get("k") is None

    @pytest.mark.asyncio()
    async def test_set_uses_setex(self):
        redis = AsyncMock()
        await RedisCacheStore(redis).set("k", "v", 21600)
        redis.setex.assert_awaited_once_with("k", 21600, "v")

    @pytest.mark.asyncio()
    async def test_get_error_degrades_to_miss(self):
        redis = AsyncMock()
        redis.get.side_effect = aioredis.ConnectionError("down")
        assert await RedisCacheStore(redis).get("k") is None

    @pytest.mark.asyncio()
    async def test_set_error_is_not_raised(self):
        redis = AsyncMock()
        redis.setex.side_effect = aioredis.ConnectionError("down")
        await RedisCacheStore(redis).set("k", "v", 10)
