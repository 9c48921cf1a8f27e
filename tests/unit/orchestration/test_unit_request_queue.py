# tests/unit/orchestration/test_unit_request_queue.py — v2
"""Tests for orchestration/request_queue.py — bounded FIFO admission."""

from __future__ import annotations

import asyncio

import pytest

from lexassist.orchestration.request_queue import RequestQueue


class TestRequestQueue:
    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            RequestQueue(0)

    @pytest.mark.asyncio
    async def test_returns_result(self):
        queue = RequestQueue(2)

        async def work():
            return 42

        assert await queue.enqueue(work) == 42
        assert queue.stats() == {"running": 0, "waiting": 0, "concurrency_limit": 2}

    @pytest.mark.asyncio
    async def test_concurrency_bound(self):
        queue = RequestQueue(2)
        in_flight = 0
        peak = 0

        async def work():
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return True

        results = await asyncio.gather(*(queue.enqueue(work) for _ in range(7)))
        assert all(results)
        assert peak == 2
        assert queue.running == 0
        assert queue.waiting == 0

    @pytest.mark.asyncio
    async def test_fifo_start_order(self):
        queue = RequestQueue(1)
        started: list[int] = []

        def make(i: int):
            async def work():
                started.append(i)
                await asyncio.sleep(0)
                return i
            return work

        await asyncio.gather(*(queue.enqueue(make(i)) for i in range(5)))
        assert started == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_waiting_count(self):
        queue = RequestQueue(1)
        release = asyncio.Event()

        async def blocker():
            await release.wait()

        tasks = [asyncio.create_task(queue.enqueue(blocker)) for _ in range(3)]
        await asyncio.sleep(0)
        assert queue.running == 1
        assert queue.waiting == 2
        release.set()
        await asyncio.gather(*tasks)
        assert queue.running == 0

    @pytest.mark.asyncio
    async def test_failure_rejects_only_its_caller(self):
        queue = RequestQueue(1)

        async def fail():
            raise RuntimeError("boom")

        async def ok():
            return "fine"

        results = await asyncio.gather(
            queue.enqueue(fail), queue.enqueue(ok), return_exceptions=True,
        )
        assert isinstance(results[0], RuntimeError)
        assert results[1] == "fine"
        assert queue.running == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_is_skipped(self):
        queue = RequestQueue(1)
        release = asyncio.Event()
        ran: list[str] = []

        async def blocker():
            await release.wait()
            ran.append("blocker")

        async def skipped():
            ran.append("skipped")

        first = asyncio.create_task(queue.enqueue(blocker))
        second = asyncio.create_task(queue.enqueue(skipped))
        await asyncio.sleep(0)
        second.cancel()
        await asyncio.sleep(0)
        release.set()
        await first
        await asyncio.sleep(0)
        assert ran == ["blocker"]

    @pytest.mark.asyncio
    async def test_release_admits_exactly_one(self):
        queue = RequestQueue(2)
        gates = [asyncio.Event() for _ in range(5)]
        started: list[int] = []

        def make(i: int):
            async def work():
                started.append(i)
                await gates[i].wait()
                return i
            return work

        async def settle():
            for _ in range(5):
                await asyncio.sleep(0)

        tasks = [asyncio.create_task(queue.enqueue(make(i))) for i in range(5)]
        await settle()
        assert (queue.running, queue.waiting) == (2, 3)
        assert started == [0, 1]

        gates[0].set()
        await settle()
        assert (queue.running, queue.waiting) == (2, 2)
        assert started == [0, 1, 2]
        assert tasks[0].done()

        for gate in gates:
            gate.set()
        assert await asyncio.gather(*tasks) == [0, 1, 2, 3, 4]
        assert (queue.running, queue.waiting) == (0, 0)
