# tests/unit/cache/test_redis_store.py — v2
"""Tests for cache/redis_store.py — against an in-process fake client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from lexassist.cache.redis_store import RedisResponseCache


class FakeRedis:
    """Minimal dict-backed stand-in for the sync redis client API used."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.expiry: dict[str, int] = {}
        self.sets: dict[str, set[str]] = {}
        self.closed = False

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value, ex=None, keepttl=False):
        self.values[key] = value
        if ex is not None:
            self.expiry[key] = ex
        elif not keepttl:
            self.expiry.pop(key, None)
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += int(self.values.pop(key, None) is not None)
            removed += int(self.sets.pop(key, None) is not None)
            self.expiry.pop(key, None)
        return removed

    def sadd(self, key, *members):
        self.sets.setdefault(key, set()).update(members)

    def srem(self, key, *members):
        self.sets.get(key, set()).difference_update(members)

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def scard(self, key):
        return len(self.sets.get(key, set()))

    def close(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(fake_redis, fake_clock):
    return RedisResponseCache(default_ttl_s=100, clock=fake_clock, client=fake_redis)


class TestRedisResponseCache:
    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        await store.set("openai:gpt-4o", "prompt", "response")
        assert await store.get("openai:gpt-4o", "prompt") == "response"

    @pytest.mark.asyncio
    async def test_native_expiry_set(self, store, fake_redis):
        await store.set("m", "p", "r", ttl_s=30)
        assert list(fake_redis.expiry.values()) == [30]

    @pytest.mark.asyncio
    async def test_get_keeps_ttl(self, store, fake_redis):
        await store.set("m", "p", "r")
        await store.get("m", "p")
        assert list(fake_redis.expiry.values()) == [100]

    @pytest.mark.asyncio
    async def test_expired_entry_is_absent(self, store, fake_clock, fake_redis):
        await store.set("m", "p", "r")
        fake_clock.advance(100)
        assert await store.get("m", "p") is None
        assert fake_redis.scard("lexassist:cache:__index__") == 0

    @pytest.mark.asyncio
    async def test_access_count_increments(self, store, fake_redis):
        await store.set("m", "p", "r")
        await store.get("m", "p")
        await store.set("m", "p", "r2")
        (raw,) = [v for k, v in fake_redis.values.items()]
        assert '"access_count":3' in raw

    @pytest.mark.asyncio
    async def test_clean_expired_drops_vanished_keys(self, store, fake_redis):
        await store.set("m", "a", "r")
        await store.set("m", "b", "r")
        # Simulate Redis expiring one key natively.
        vanished = next(k for k in fake_redis.values)
        del fake_redis.values[vanished]
        assert await store.clean_expired() == 1
        assert (await store.stats()).entries == 1

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_miss(self, store, fake_redis):
        await store.set("m", "p", "r")
        key = next(k for k in fake_redis.values)
        fake_redis.values[key] = "not json"
        assert await store.get("m", "p") is None

    @pytest.mark.asyncio
    async def test_clear_and_stats(self, store, fake_redis):
        await store.set("m", "a", "r")
        await store.set("m", "b", "r")
        stats = await store.stats()
        assert stats.backend == "redis"
        assert stats.entries == 2
        assert await store.clear() == 2
        assert fake_redis.values == {}

    def test_close(self, store, fake_redis):
        store.close()
        assert fake_redis.closed is True


class TestConstruction:
    def test_requires_url_without_client(self):
        with pytest.raises(ValueError, match="redis_url"):
            RedisResponseCache()

    def test_builds_client_from_url(self):
        with patch("redis.Redis.from_url", return_value=MagicMock()) as from_url:
            RedisResponseCache(redis_url="redis://cache:6379/0")
        from_url.assert_called_once_with("redis://cache:6379/0", decode_responses=True)
