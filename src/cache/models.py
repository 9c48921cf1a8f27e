# src/cache/models.py — v2
"""Cache domain models: CacheEntry, CacheStats."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Single cached AI response."""

    cache_key: str
    provider_model: str
    prompt_text: str
    response_text: str
    created_at: datetime
    last_accessed: datetime
    access_count: int = 1
    ttl_seconds: int | None = None

    def effective_ttl(self, default_ttl_s: int) -> int:
        """Per-entry TTL if set, else the store default."""
        return self.ttl_seconds if self.ttl_seconds is not None else default_ttl_s

    def is_expired(self, now: datetime, default_ttl_s: int) -> bool:
        """Expired once now - created_at reaches the TTL."""
        age = (now - self.created_at).total_seconds()
        return age >= self.effective_ttl(default_ttl_s)


class CacheStats(BaseModel):
    """Point-in-time cache tier statistics."""

    backend: str
    entries: int = 0
    hits: int = 0
    misses: int = 0
    default_ttl_s: int = 0
    max_entries: int | None = None

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0
