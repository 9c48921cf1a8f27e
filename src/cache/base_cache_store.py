# src/cache/base_cache_store.py — v2
"""Abstract response cache interface.

Every tier (memory, SQLite, Redis) keys entries by derive_cache_key() and
applies the same TTL and upsert rules, so the orchestrator can treat them
interchangeably.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from lexassist.cache.models import CacheEntry, CacheStats

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseResponseCache(ABC):
    """Unified interface for AI response cache tiers.

    Args:
        default_ttl_s: TTL applied to entries written without ttl_s.
        clock: Time source, injectable for deterministic expiry tests.
    """

    backend: str = "base"

    def __init__(self, default_ttl_s: int, clock: Clock | None = None) -> None:
        self.default_ttl_s = default_ttl_s
        self._clock = clock or utc_now
        self._hits = 0
        self._misses = 0

    @abstractmethod
    async def get(
        self,
        model: str,
        prompt: str,
        options: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Return the live cached response, or None (expired counts as absent)."""

    @abstractmethod
    async def set(
        self,
        model: str,
        prompt: str,
        response: str,
        options: Mapping[str, Any] | None = None,
        ttl_s: int | None = None,
    ) -> None:
        """Upsert a response; ttl_s overrides the default for this entry."""

    @abstractmethod
    async def clean_expired(self) -> int:
        """Remove expired entries. Returns the number removed."""

    @abstractmethod
    async def clear(self) -> int:
        """Remove every entry. Returns the number removed."""

    @abstractmethod
    async def stats(self) -> CacheStats:
        """Entry count and hit/miss counters."""

    def close(self) -> None:
        """Release backend resources."""

    # --- Shared helpers ---

    def _now(self) -> datetime:
        return self._clock()

    def _record(self, hit: bool) -> None:
        if hit:
            self._hits += 1
        else:
            self._misses += 1

    def _upsert_entry(
        self,
        existing: CacheEntry | None,
        key: str,
        model: str,
        prompt: str,
        response: str,
        ttl_s: int | None,
    ) -> CacheEntry:
        """Build the entry to store: a live entry keeps counting accesses."""
        now = self._now()
        access_count = 1
        if existing is not None and not existing.is_expired(now, self.default_ttl_s):
            access_count = existing.access_count + 1
        return CacheEntry(
            cache_key=key,
            provider_model=model,
            prompt_text=prompt,
            response_text=response,
            created_at=now,
            last_accessed=now,
            access_count=access_count,
            ttl_seconds=ttl_s,
        )
