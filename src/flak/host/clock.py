"""Deferred-execution clocks — the only concurrency substrate of the engine.

SimulationClock
    Virtual time.  ``advance(dt)`` / ``run_until(t)`` pop due callbacks in
    (time, submission order) and run them one at a time.  Callbacks may
    schedule more callbacks; those run in the same advance if they fall due.
    Deterministic, so tests drive barrages second by second.

RealtimeClock
    Same queue, driven from one daemon thread at 10 Hz against wall time
    (``time.monotonic``).  Callbacks still run sequentially on that thread,
    so engine state is only ever touched from one place.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from typing import Callable

from loguru import logger


class TimerTask:
    """Handle for one scheduled callback."""

    __slots__ = ("time", "callback", "_cancelled")

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.time = when
        self.callback = callback
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class SimulationClock:
    """Virtual-time scheduler."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, TimerTask]] = []
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of scheduled, not-yet-cancelled callbacks."""
        with self._lock:
            return sum(1 for _, _, task in self._queue if not task.cancelled)

    def schedule_at(self, when: float, callback: Callable[[], None]) -> TimerTask:
        # Never schedule into the past; late requests run on the next pass
        task = TimerTask(max(when, self._now), callback)
        with self._lock:
            heapq.heappush(self._queue, (task.time, next(self._seq), task))
        return task

    def _pop_due(self, until: float) -> TimerTask | None:
        with self._lock:
            while self._queue and self._queue[0][0] <= until:
                _, _, task = heapq.heappop(self._queue)
                if not task.cancelled:
                    return task
        return None

    def run_until(self, until: float) -> int:
        """Run every callback due at or before *until*.  Returns how many ran."""
        ran = 0
        while True:
            task = self._pop_due(until)
            if task is None:
                break
            self._now = max(self._now, task.time)
            try:
                task.callback()
            except Exception:
                logger.exception(f"Scheduled callback failed at t={task.time:.2f}")
            ran += 1
        self._now = max(self._now, until)
        return ran

    def advance(self, dt: float) -> int:
        return self.run_until(self._now + dt)


class RealtimeClock(SimulationClock):
    """SimulationClock advanced from a daemon thread against wall time."""

    TICK = 0.1

    def __init__(self) -> None:
        super().__init__(start=0.0)
        self._running = False
        self._thread: threading.Thread | None = None
        self._origin = 0.0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._origin = time.monotonic() - self._now
        self._thread = threading.Thread(
            target=self._tick_loop, daemon=True, name="flak-clock",
        )
        self._thread.start()
        logger.info("Realtime flak clock started")

    def stop(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        logger.info("Realtime flak clock stopped")

    def _tick_loop(self) -> None:
        while self._running:
            time.sleep(self.TICK)
            self.run_until(time.monotonic() - self._origin)
