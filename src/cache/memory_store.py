# src/cache/memory_store.py — v1
"""Process-local response cache with TTL and an LRU size cap.

Lives only as long as the process. Entries are kept in an OrderedDict in
recency order; writes beyond max_entries evict the least recently used.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Mapping
from typing import Any

from lexassist.cache.base_cache_store import BaseResponseCache, Clock
from lexassist.cache.keys import derive_cache_key
from lexassist.cache.models import CacheEntry, CacheStats

logger = logging.getLogger(__name__)


class MemoryResponseCache(BaseResponseCache):
    """In-memory cache tier (default TTL 1 hour)."""

    backend = "memory"

    def __init__(
        self,
        default_ttl_s: int = 3600,
        max_entries: int = 1000,
        clock: Clock | None = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        super().__init__(default_ttl_s, clock)
        self.max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(
        self,
        model: str,
        prompt: str,
        options: Mapping[str, Any] | None = None,
    ) -> str | None:
        key = derive_cache_key(model, prompt, options)
        entry = self._entries.get(key)
        now = self._now()

        if entry is None or entry.is_expired(now, self.default_ttl_s):
            if entry is not None:
                del self._entries[key]
            self._record(hit=False)
            return None

        entry.access_count += 1
        entry.last_accessed = now
        self._entries.move_to_end(key)
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
        self._entries[key] = self._upsert_entry(
            self._entries.get(key), key, model, prompt, response, ttl_s,
        )
        self._entries.move_to_end(key)

        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Memory cache evicted LRU entry %s", evicted[:12])

    async def clean_expired(self) -> int:
        now = self._now()
        expired = [
            key for key, entry in self._entries.items()
            if entry.is_expired(now, self.default_ttl_s)
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    async def stats(self) -> CacheStats:
        return CacheStats(
            backend=self.backend,
            entries=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            default_ttl_s=self.default_ttl_s,
            max_entries=self.max_entries,
        )
