"""Key → value stores with per-entry TTL for the address cache.

Values are strings (serialized JSON). Expiry is passive: a stale entry
simply reads as missing and is overwritten by the next ``set``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...


class InMemoryTTLCache:
    """Process-local TTL cache.

    Plain dict reads/writes only, so concurrent tasks may race on a key;
    the last writer wins and both values are equally fresh.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, value)

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheStore:
    """Redis-backed store (GET / SETEX). Redis failures degrade to a cache miss."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def get(self, key: str) -> str | None:
        try:
            raw = await self._redis.get(key)
        except aioredis.RedisError:
            logger.warning("Redis GET failed for %s, treating as miss", key)
            return None
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._redis.setex(key, ttl_seconds, value)
        except aioredis.RedisError:
            logger.warning("Redis SETEX failed for %s, result not cached", key)
