"""Tests for the in-memory and Redis cache backends."""

from unittest.mock import AsyncMock

import pytest

from einsteinbot.cache import InMemoryCache, RedisCache, create_cache
from einsteinbot.config.schema import CacheConfig

from tests.conftest import FakeClock


class TestInMemoryCache:
    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self):
        cache = InMemoryCache()
        assert await cache.get("nope") is None

    @pytest.mark.asyncio
    async def test_set_overwrites_and_remove(self):
        cache = InMemoryCache()
        await cache.set("k", "v1")
        await cache.set("k", "v2")
        assert await cache.get("k") == "v2"

        await cache.remove("k")
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_remove_missing_is_silent(self):
        cache = InMemoryCache()
        await cache.remove("nope")
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_per_entry_ttl_expires(self):
        clock = FakeClock(100.0)
        cache = InMemoryCache(clock=clock)
        await cache.set("k", "v", ttl_seconds=10)

        clock.advance(9)
        assert await cache.get("k") == "v"
        clock.advance(1)
        assert await cache.get("k") is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_zero_ttl_is_not_retrievable(self):
        cache = InMemoryCache(clock=FakeClock())
        await cache.set("k", "v", ttl_seconds=0)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_default_ttl_applies_without_explicit_ttl(self):
        clock = FakeClock(0.0)
        cache = InMemoryCache(ttl_seconds=60, clock=clock)
        await cache.set("k", "v")

        clock.advance(59)
        assert await cache.get("k") == "v"
        clock.advance(1)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_no_default_ttl_never_expires(self):
        clock = FakeClock(0.0)
        cache = InMemoryCache(clock=clock)
        await cache.set("k", "v")
        clock.advance(10**9)
        assert await cache.get("k") == "v"


class TestRedisCache:
    def _cache(self, **kwargs):
        client = AsyncMock()
        return RedisCache(client=client, **kwargs), client

    @pytest.mark.asyncio
    async def test_set_uses_default_ttl(self):
        cache, client = self._cache()
        await cache.set("k", "v")
        client.set.assert_awaited_once_with("k", "v", ex=259140)

    @pytest.mark.asyncio
    async def test_set_with_explicit_ttl(self):
        cache, client = self._cache(ttl_seconds=100)
        await cache.set("k", "v", ttl_seconds=5)
        client.set.assert_awaited_once_with("k", "v", ex=5)

    @pytest.mark.asyncio
    async def test_non_positive_ttl_deletes(self):
        cache, client = self._cache()
        await cache.set("k", "v", ttl_seconds=0)
        client.set.assert_not_awaited()
        client.delete.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self):
        cache, client = self._cache()
        client.get.return_value = b"session-1"
        assert await cache.get("k") == "session-1"

    @pytest.mark.asyncio
    async def test_get_missing(self):
        cache, client = self._cache()
        client.get.return_value = None
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_remove_and_close(self):
        cache, client = self._cache()
        await cache.remove("k")
        await cache.close()
        client.delete.assert_awaited_once_with("k")
        client.aclose.assert_awaited_once()


class TestCreateCache:
    def test_memory_backend(self):
        cache = create_cache(CacheConfig())
        assert isinstance(cache, InMemoryCache)
        assert cache.ttl_seconds == 259140

    def test_redis_backend(self):
        cache = create_cache(CacheConfig(backend="redis", redis_url="redis://cache:6379", ttl_seconds=30))
        assert isinstance(cache, RedisCache)
        assert cache.ttl_seconds == 30
