# src/cache/cache_factory.py — v3
"""Factory for cache tier instantiation."""

from __future__ import annotations

from lexassist.cache.base_cache_store import BaseResponseCache
from lexassist.cache.memory_store import MemoryResponseCache
from lexassist.config.settings import Settings


def create_persistent_cache(settings: Settings | None = None) -> BaseResponseCache:
    """Instantiate the configured persistent cache backend.

    Args:
        settings: Application settings. Defaults to SQLite at the default path.

    Returns:
        Configured BaseResponseCache implementation.
    """
    settings = settings or Settings(_env_file=None)  # type: ignore[call-arg]
    backend = settings.cache_backend

    if backend == "sqlite":
        from lexassist.cache.sqlite_store import SqliteResponseCache
        return SqliteResponseCache(
            db_path=settings.cache_db_path,
            default_ttl_s=settings.cache_ttl_s,
        )

    if backend == "redis":
        from lexassist.cache.redis_store import RedisResponseCache
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisResponseCache(
            redis_url=settings.cache_redis_url,
            default_ttl_s=settings.cache_ttl_s,
        )

    raise ValueError(f"Unsupported cache backend: {backend!r}")


def create_memory_cache(settings: Settings | None = None) -> MemoryResponseCache:
    """Instantiate the process-local cache tier."""
    if settings is None:
        return MemoryResponseCache()
    return MemoryResponseCache(
        default_ttl_s=settings.memory_cache_ttl_s,
        max_entries=settings.memory_cache_max_entries,
    )
