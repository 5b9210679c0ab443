"""
Tests for countdown schedulers.
"""

from __future__ import annotations

import asyncio
import threading
import time

import pytest

from interview_engine.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    ThreadingScheduler,
)


class TestManualScheduler:
    """Tests for the virtual-time scheduler."""

    def test_advance_fires_once_per_interval(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.repeat(1.0, lambda: calls.append(scheduler.now_ms()))

        fired = scheduler.advance(3)

        assert fired == 3
        assert calls == [1000, 2000, 3000]
        assert scheduler.now_ms() == 3000

    def test_partial_advance_does_not_fire(self):
        scheduler = ManualScheduler(start_ms=500)
        calls = []
        scheduler.repeat(1.0, lambda: calls.append(1))

        scheduler.advance(0.5)
        assert calls == []
        assert scheduler.now_ms() == 1000

        scheduler.advance(0.5)
        assert calls == [1]

    def test_cancel_stops_firing(self):
        scheduler = ManualScheduler()
        calls = []
        task = scheduler.repeat(1.0, lambda: calls.append(1))

        scheduler.advance(2)
        task.cancel()
        scheduler.advance(5)

        assert len(calls) == 2
        assert task.cancelled is True
        assert scheduler.active_tasks == []

    def test_callback_can_cancel_its_own_task(self):
        scheduler = ManualScheduler()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) == 2:
                task.cancel()

        task = scheduler.repeat(1.0, callback)
        scheduler.advance(10)

        assert len(calls) == 2

    def test_multiple_tasks_fire_in_time_order(self):
        scheduler = ManualScheduler()
        order = []
        scheduler.repeat(2.0, lambda: order.append("slow"))
        scheduler.repeat(1.0, lambda: order.append("fast"))

        scheduler.advance(2)

        # simultaneous deadlines fire in registration order
        assert order == ["fast", "slow", "fast"]


class TestAsyncioScheduler:
    """Tests for the event-loop scheduler."""

    @pytest.mark.asyncio
    async def test_repeats_until_cancelled(self):
        calls = []
        task = AsyncioScheduler().repeat(0.01, lambda: calls.append(1))

        for _ in range(200):
            if len(calls) >= 3:
                break
            await asyncio.sleep(0.01)
        task.cancel()
        await asyncio.wait_for(task.wait_closed(), timeout=1.0)
        count = len(calls)
        await asyncio.sleep(0.05)

        assert count >= 3
        assert len(calls) == count
        assert task.cancelled is True

    @pytest.mark.asyncio
    async def test_callback_errors_do_not_stop_loop(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")

        task = AsyncioScheduler().repeat(0.01, flaky)
        for _ in range(200):
            if len(calls) >= 2:
                break
            await asyncio.sleep(0.01)
        task.cancel()
        await asyncio.wait_for(task.wait_closed(), timeout=1.0)

        assert len(calls) >= 2

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler().repeat(1.0, lambda: None)


class TestThreadingScheduler:
    """Tests for the thread scheduler."""

    def test_repeats_until_cancelled(self):
        fired = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) >= 3:
                fired.set()

        task = ThreadingScheduler().repeat(0.01, callback)
        assert fired.wait(timeout=2.0)
        task.cancel()
        task.join(timeout=1.0)
        count = len(calls)
        time.sleep(0.05)

        assert task.cancelled is True
        assert count >= 3
        assert len(calls) == count
