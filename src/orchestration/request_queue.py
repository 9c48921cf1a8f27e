# src/orchestration/request_queue.py — v1
"""Bounded-concurrency FIFO request queue.

At most concurrency_limit invocations run at once; the rest wait in
arrival order. Starting is FIFO, finishing is not. A failing invocation
rejects only its own caller and still frees its slot.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class QueuedRequest(Generic[T]):
    """A waiting invocation and the future its caller awaits."""

    invocation: Callable[[], Awaitable[T]]
    future: asyncio.Future[T]


class RequestQueue:
    """FIFO admission with an in-flight bound.

    Counters are only touched from the event loop thread, so no lock is
    needed.

    Args:
        concurrency_limit: Maximum simultaneously running invocations.
    """

    def __init__(self, concurrency_limit: int = 3) -> None:
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be >= 1")
        self._limit = concurrency_limit
        self._running = 0
        self._waiting: deque[QueuedRequest[Any]] = deque()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def concurrency_limit(self) -> int:
        return self._limit

    @property
    def running(self) -> int:
        return self._running

    @property
    def waiting(self) -> int:
        return len(self._waiting)

    def stats(self) -> dict[str, int]:
        return {
            "running": self._running,
            "waiting": len(self._waiting),
            "concurrency_limit": self._limit,
        }

    async def enqueue(self, task: Callable[[], Awaitable[T]]) -> T:
        """Run task once a slot is free and return its result.

        Raises:
            Exception: Whatever task raised.
        """
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._waiting.append(QueuedRequest(task, future))
        if self._waiting and self._running >= self._limit:
            logger.debug("Request queued (running=%d, waiting=%d)", self._running, len(self._waiting))
        self._admit()
        return await future

    def _admit(self) -> None:
        while self._running < self._limit and self._waiting:
            request = self._waiting.popleft()
            if request.future.cancelled():
                continue
            self._running += 1
            started = asyncio.create_task(self._run(request))
            self._tasks.add(started)
            started.add_done_callback(self._tasks.discard)

    async def _run(self, request: QueuedRequest[Any]) -> None:
        try:
            result = await request.invocation()
        except asyncio.CancelledError:
            request.future.cancel()
            raise
        except Exception as e:
            if not request.future.done():
                request.future.set_exception(e)
        else:
            if not request.future.done():
                request.future.set_result(result)
        finally:
            self._running -= 1
            self._admit()
