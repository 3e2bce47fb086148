"""Idle-time task scheduler for cooperative, never-blocking tree builds.

Everything that touches a view's tree or document runs inside callbacks
executed by ``IdleScheduler.run_once`` on the owning thread. Other threads
(for example a subprocess reader) only post callbacks.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

DEFAULT_IDLE_INTERVAL_SECONDS = 0.01


class CancellationToken:
    """Liveness flag checked by deferred work before it resumes."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


@dataclass(order=True)
class _ScheduledTask:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)


class IdleScheduler:
    """Thread-safe timer queue drained on one logical thread.

    ``clock`` and ``sleep`` are injectable so tests can advance time without
    waiting. With the default ``sleep`` the scheduler waits on a condition and
    wakes early when another thread posts work.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._cond = threading.Condition()
        self._tasks: list[_ScheduledTask] = []
        self._seq = itertools.count()
        self.scheduled_count = 0
        self.steps_run = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` once at least ``delay`` seconds from now."""
        with self._cond:
            task = _ScheduledTask(self._clock() + max(0.0, delay), next(self._seq), callback)
            heapq.heappush(self._tasks, task)
            self.scheduled_count += 1
            self._cond.notify_all()

    def call_soon(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the next drain; safe to call from any thread."""
        self.call_later(0.0, callback)

    def pending_count(self) -> int:
        with self._cond:
            return len(self._tasks)

    def _wait(self, seconds: float) -> None:
        if self._sleep is not None:
            self._sleep(seconds)
        else:
            self._cond.wait(seconds)

    def run_once(self, timeout: float | None = None) -> bool:
        """Run the next task, waiting for it to fall due.

        Returns ``False`` without running anything when ``timeout`` expires or
        when nothing is queued and no timeout was given.
        """
        deadline = None if timeout is None else self._clock() + timeout
        with self._cond:
            while True:
                now = self._clock()
                if self._tasks and self._tasks[0].due <= now:
                    task = heapq.heappop(self._tasks)
                    break
                if deadline is not None and now >= deadline:
                    return False
                if not self._tasks and deadline is None:
                    return False
                waits = []
                if self._tasks:
                    waits.append(self._tasks[0].due - now)
                if deadline is not None:
                    waits.append(deadline - now)
                self._wait(max(0.0, min(waits)))
        task.callback()
        self.steps_run += 1
        return True

    def run_until_idle(self) -> int:
        """Drain every queued task, including ones queued while draining."""
        ran = 0
        while self.run_once():
            ran += 1
        return ran

    def run_until(self, predicate: Callable[[], bool], timeout: float = 10.0) -> bool:
        """Run tasks until ``predicate()`` holds or ``timeout`` elapses."""
        deadline = self._clock() + timeout
        while not predicate():
            remaining = deadline - self._clock()
            if remaining <= 0:
                return predicate()
            self.run_once(timeout=remaining)
        return True


__all__ = [
    "DEFAULT_IDLE_INTERVAL_SECONDS",
    "CancellationToken",
    "IdleScheduler",
]
