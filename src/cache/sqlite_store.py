# src/cache/sqlite_store.py — v2
"""SQLite-backed persistent response cache (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. Timestamps are stored as epoch
seconds so expiry checks are plain numeric comparisons, and writes are a
single INSERT ... ON CONFLICT statement so concurrent writers of the same
key need no explicit transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from lexassist.cache.base_cache_store import BaseResponseCache, Clock
from lexassist.cache.keys import canonical_json, derive_cache_key
from lexassist.cache.models import CacheStats

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ai_response_cache (
    cache_key TEXT PRIMARY KEY,
    provider TEXT NOT NULL,
    model_name TEXT NOT NULL,
    prompt TEXT NOT NULL,
    response TEXT NOT NULL,
    options TEXT NOT NULL DEFAULT '{}',
    created_at REAL NOT NULL,
    last_accessed REAL NOT NULL,
    access_count INTEGER NOT NULL DEFAULT 1,
    expires_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_ai_response_cache_expires ON ai_response_cache(expires_at);
"""

# A live row keeps counting accesses; an expired one restarts at 1.
_UPSERT = """
INSERT INTO ai_response_cache
    (cache_key, provider, model_name, prompt, response, options,
     created_at, last_accessed, access_count, expires_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, 1, ?)
ON CONFLICT(cache_key) DO UPDATE SET
    response = excluded.response,
    options = excluded.options,
    created_at = excluded.created_at,
    last_accessed = excluded.last_accessed,
    access_count = CASE
        WHEN ai_response_cache.expires_at > excluded.created_at
        THEN ai_response_cache.access_count + 1
        ELSE 1
    END,
    expires_at = excluded.expires_at
"""


def split_provider_model(model: str) -> tuple[str, str]:
    """Split 'provider:model' into its parts; bare names have no provider."""
    if ":" in model:
        provider, name = model.split(":", 1)
        return provider, name
    return "", model


class SqliteResponseCache(BaseResponseCache):
    """Durable cache tier shared across restarts (default TTL 24 hours)."""

    backend = "sqlite"

    def __init__(
        self,
        db_path: Path | str,
        default_ttl_s: int = 24 * 3600,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(default_ttl_s, clock)
        if str(db_path) == ":memory:":
            self._db_path = None
            target = ":memory:"
        else:
            self._db_path = Path(db_path).expanduser()
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(self._db_path)
        # The service may be driven from a server thread other than the creator.
        self._conn = sqlite3.connect(target, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(
        self,
        model: str,
        prompt: str,
        options: Mapping[str, Any] | None = None,
    ) -> str | None:
        key = derive_cache_key(model, prompt, options)
        now = self._now().timestamp()
        row = self._conn.execute(
            "SELECT response FROM ai_response_cache WHERE cache_key = ? AND expires_at > ?",
            (key, now),
        ).fetchone()
        if row is None:
            self._record(hit=False)
            return None

        self._conn.execute(
            "UPDATE ai_response_cache SET access_count = access_count + 1, last_accessed = ? "
            "WHERE cache_key = ?",
            (now, key),
        )
        self._conn.commit()
        self._record(hit=True)
        return row[0]

    async def set(
        self,
        model: str,
        prompt: str,
        response: str,
        options: Mapping[str, Any] | None = None,
        ttl_s: int | None = None,
    ) -> None:
        key = derive_cache_key(model, prompt, options)
        now = self._now().timestamp()
        ttl = ttl_s if ttl_s is not None else self.default_ttl_s
        provider, model_name = split_provider_model(model)
        self._conn.execute(
            _UPSERT,
            (
                key,
                provider,
                model_name,
                prompt,
                response,
                canonical_json(dict(options) if options else {}),
                now,
                now,
                now + ttl,
            ),
        )
        self._conn.commit()

    async def clean_expired(self) -> int:
        now = self._now().timestamp()
        cursor = self._conn.execute(
            "DELETE FROM ai_response_cache WHERE expires_at <= ?", (now,)
        )
        self._conn.commit()
        removed = cursor.rowcount
        if removed:
            logger.info("Removed %d expired entries from %s cache", removed, self.backend)
        return removed

    async def clear(self) -> int:
        cursor = self._conn.execute("DELETE FROM ai_response_cache")
        self._conn.commit()
        return cursor.rowcount

    async def stats(self) -> CacheStats:
        (count,) = self._conn.execute("SELECT COUNT(*) FROM ai_response_cache").fetchone()
        return CacheStats(
            backend=self.backend,
            entries=count,
            hits=self._hits,
            misses=self._misses,
            default_ttl_s=self.default_ttl_s,
        )

    async def access_count(
        self,
        model: str,
        prompt: str,
        options: Mapping[str, Any] | None = None,
    ) -> int:
        """Stored access count for a key (0 if absent), without touching it."""
        row = self._conn.execute(
            "SELECT access_count FROM ai_response_cache WHERE cache_key = ?",
            (derive_cache_key(model, prompt, options),),
        ).fetchone()
        return row[0] if row else 0

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
