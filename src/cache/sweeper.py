# src/cache/sweeper.py — v1
"""Periodic background removal of expired cache entries.

Expired entries are already invisible to readers; sweeping only reclaims
space. A failing sweep is logged and retried on the next interval.
"""

from __future__ import annotations

import asyncio
import logging

from lexassist.cache.base_cache_store import BaseResponseCache

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Runs clean_expired() on every tier at a fixed interval.

    Args:
        caches: Cache tiers to sweep.
        interval_s: Seconds between sweeps (hourly by default).
    """

    def __init__(self, caches: list[BaseResponseCache], interval_s: float = 3600) -> None:
        self._caches = caches
        self._interval_s = interval_s
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="cache-sweeper")
        logger.debug("Cache sweeper started (interval=%ss)", self._interval_s)

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def run_once(self) -> dict[str, int]:
        """Sweep every tier once. Returns removed counts per backend."""
        removed: dict[str, int] = {}
        for cache in self._caches:
            try:
                removed[cache.backend] = await cache.clean_expired()
            except Exception:
                logger.exception("Cache sweep failed for %s tier", cache.backend)
                removed[cache.backend] = 0
        total = sum(removed.values())
        if total:
            logger.info("Cache sweep removed %d expired entries: %s", total, removed)
        return removed

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            await self.run_once()
