# src/cache/redis_store.py — v2
"""Redis-backed persistent response cache (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for multi-instance deployments sharing one cache. Entries carry a
native Redis expiry; an index set of keys supports sweep and clear.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from lexassist.cache.base_cache_store import BaseResponseCache, Clock
from lexassist.cache.keys import derive_cache_key
from lexassist.cache.models import CacheEntry, CacheStats

logger = logging.getLogger(__name__)

_KEY_PREFIX = "lexassist:cache:"
_INDEX_KEY = "lexassist:cache:__index__"


class RedisResponseCache(BaseResponseCache):
    """Redis-backed cache tier (default TTL 24 hours).

    Args:
        redis_url: Connection URL, used when no client is given.
        default_ttl_s: TTL applied to entries written without ttl_s.
        clock: Time source for expiry checks.
        client: Pre-built redis client (sync API).
    """

    backend = "redis"

    def __init__(
        self,
        redis_url: str | None = None,
        default_ttl_s: int = 24 * 3600,
        clock: Clock | None = None,
        client: Any = None,
    ) -> None:
        super().__init__(default_ttl_s, clock)
        if client is None:
            if not redis_url:
                raise ValueError("redis_url is required when no client is given")
            try:
                import redis
            except ImportError as e:
                raise ImportError(
                    "redis package required: pip install redis"
                ) from e
            client = redis.Redis.from_url(redis_url, decode_responses=True)
        self._client = client

    async def get(
        self,
        model: str,
        prompt: str,
        options: Mapping[str, Any] | None = None,
    ) -> str | None:
        key = derive_cache_key(model, prompt, options)
        entry = self._load(key)
        now = self._now()

        if entry is None or entry.is_expired(now, self.default_ttl_s):
            if entry is not None:
                self._delete(key)
            self._record(hit=False)
            return None

        entry.access_count += 1
        entry.last_accessed = now
        self._client.set(f"{_KEY_PREFIX}{key}", entry.model_dump_json(), keepttl=True)
        self._record(hit=True)
        return entry.response_text

    async def set(
        self,
        model: str,
        prompt: str,
        response: str,
        options: Mapping[str, Any] | None = None,
        ttl_s: int | None = None,
    ) -> None:
        key = derive_cache_key(model, prompt, options)
        entry = self._upsert_entry(self._load(key), key, model, prompt, response, ttl_s)
        self._client.set(
            f"{_KEY_PREFIX}{key}",
            entry.model_dump_json(),
            ex=entry.effective_ttl(self.default_ttl_s),
        )
        self._client.sadd(_INDEX_KEY, key)

    async def clean_expired(self) -> int:
        """Drop expired entries and index members whose key Redis already expired."""
        now = self._now()
        removed = 0
        for key in self._client.smembers(_INDEX_KEY):
            entry = self._load(key)
            if entry is None or entry.is_expired(now, self.default_ttl_s):
                self._delete(key)
                removed += 1
        return removed

    async def clear(self) -> int:
        keys = list(self._client.smembers(_INDEX_KEY))
        for key in keys:
            self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.delete(_INDEX_KEY)
        return len(keys)

    async def stats(self) -> CacheStats:
        return CacheStats(
            backend=self.backend,
            entries=self._client.scard(_INDEX_KEY),
            hits=self._hits,
            misses=self._misses,
            default_ttl_s=self.default_ttl_s,
        )

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()

    # --- Internal helpers ---

    def _load(self, key: str) -> CacheEntry | None:
        data = self._client.get(f"{_KEY_PREFIX}{key}")
        if data is None:
            return None
        try:
            return CacheEntry.model_validate_json(data)
        except ValidationError as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key[:12], e)
            return None

    def _delete(self, key: str) -> None:
        self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.srem(_INDEX_KEY, key)
