"""
Countdown Schedulers.

The engine needs two primitives from its host: "repeat this callback every
N seconds" and "cancel". Three implementations are provided:

    - AsyncioScheduler: a task on the running event loop, with an
      interruptible wait so cancel() takes effect immediately.
    - ThreadingScheduler: a daemon thread for synchronous hosts.
    - ManualScheduler: no real time at all. Tests call advance() to fire
      due callbacks deterministically; it also serves as the engine clock.

Example usage:
    scheduler = AsyncioScheduler()
    task = scheduler.repeat(1.0, engine.tick)
    ...
    task.cancel()
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol


logger = logging.getLogger(__name__)


Callback = Callable[[], None]


class ScheduledTask(Protocol):
    """Handle for a repeating callback."""

    @property
    def cancelled(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Source of repeating callbacks."""

    def repeat(self, interval_seconds: float, callback: Callback) -> ScheduledTask:
        ...


def _run_callback(callback: Callback) -> None:
    try:
        callback()
    except Exception as e:
        logger.error("Scheduled callback failed: %s", e, exc_info=True)


# =============================================================================
# asyncio
# =============================================================================


class AsyncioScheduledTask:
    """Repeating callback driven by an asyncio task."""

    def __init__(self, interval_seconds: float, callback: Callback) -> None:
        self._interval = interval_seconds
        self._callback = callback
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task = asyncio.get_running_loop().create_task(self._run_loop())

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def cancel(self) -> None:
        self._stop_event.set()

    async def wait_closed(self) -> None:
        """Wait until the loop has observed cancellation and exited."""
        await self._task

    async def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                break
            except asyncio.TimeoutError:
                pass
            _run_callback(self._callback)


class AsyncioScheduler:
    """Schedules callbacks on the running event loop. Must be used from a coroutine context."""

    def repeat(self, interval_seconds: float, callback: Callback) -> AsyncioScheduledTask:
        return AsyncioScheduledTask(interval_seconds, callback)


# =============================================================================
# threading
# =============================================================================


class ThreadingScheduledTask:
    """Repeating callback on a daemon thread."""

    def __init__(self, interval_seconds: float, callback: Callback) -> None:
        self._interval = interval_seconds
        self._callback = callback
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run_loop, name="interview-countdown", daemon=True
        )
        self._thread.start()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def cancel(self) -> None:
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)

    def _run_loop(self) -> None:
        # wait() returns True once cancelled
        while not self._stop_event.wait(self._interval):
            if self._stop_event.is_set():
                break
            _run_callback(self._callback)


class ThreadingScheduler:
    """Schedules callbacks on background threads, one thread per task."""

    def repeat(self, interval_seconds: float, callback: Callback) -> ThreadingScheduledTask:
        return ThreadingScheduledTask(interval_seconds, callback)


# =============================================================================
# Manual (virtual time)
# =============================================================================


@dataclass
class ManualScheduledTask:
    """Task registered with a ManualScheduler."""

    interval_seconds: float
    callback: Callback
    next_due: float
    _cancelled: bool = field(default=False, repr=False)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler with a virtual clock.

    Example:
        >>> scheduler = ManualScheduler()
        >>> engine = InterviewEngine(..., scheduler=scheduler, clock=scheduler.now_ms)
        >>> scheduler.advance(5)  # fires five 1-second ticks
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms / 1000.0
        self._tasks: list[ManualScheduledTask] = []

    def now_ms(self) -> int:
        """Current virtual time in epoch milliseconds."""
        return int(round(self._now * 1000))

    def repeat(self, interval_seconds: float, callback: Callback) -> ManualScheduledTask:
        task = ManualScheduledTask(
            interval_seconds=interval_seconds,
            callback=callback,
            next_due=self._now + interval_seconds,
        )
        self._tasks.append(task)
        return task

    @property
    def active_tasks(self) -> list[ManualScheduledTask]:
        return [task for task in self._tasks if not task.cancelled]

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every due callback in time order.

        Callbacks cancelled mid-advance (including by another callback)
        stop firing immediately.

        Returns:
            Number of callbacks fired.
        """
        target = self._now + seconds
        fired = 0
        while True:
            due = [task for task in self.active_tasks if task.next_due <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.next_due)
            self._now = task.next_due
            task.next_due += task.interval_seconds
            task.callback()
            fired += 1
        self._now = target
        self._tasks = self.active_tasks
        return fired
