"""
Timer queues that drive the game's scheduled callbacks.

Two implementations share one interface:
 - ManualTimers: a virtual millisecond clock that only moves when told to.
   Used for headless simulations and tests.
 - ScheduleTimers: wall-clock timers backed by a `schedule.Scheduler`, run
   from a single loop so callbacks never overlap.

Both fire callbacks one at a time, each to completion, and both can be
suspended: while suspended nothing fires, and on resume every pending timer
is pushed back by the time it spent waiting out the suspension.
"""

import datetime
import heapq
import itertools
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

import schedule

logger = logging.getLogger(__name__)


class TimerHandle:
    """A single scheduled callback. Cancelling is idempotent."""

    def __init__(self, due: float, seq: int, callback: Callable[..., Any], args: tuple):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def __lt__(self, other: "TimerHandle") -> bool:
        return (self.due, self.seq) < (other.due, other.seq)

    def __repr__(self):
        name = getattr(self.callback, "__name__", repr(self.callback))
        return f"<TimerHandle {name} due={self.due:.0f}ms active={self.active}>"


class TimerQueue:
    """
    Base class/interface for timer queues.

    Delays and times are in milliseconds.
    """

    def __init__(self):
        self._seq = itertools.count()
        self._suspended_at: Optional[float] = None
        # (handle, time it started waiting out the suspension)
        self._suspended_handles: List[Tuple[TimerHandle, float]] = []

    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args) -> TimerHandle:
        raise NotImplementedError

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        if handle is not None:
            handle.cancelled = True

    def pending(self) -> List[TimerHandle]:
        raise NotImplementedError

    @property
    def suspended(self) -> bool:
        return self._suspended_at is not None

    def suspend(self) -> None:
        """Stop firing callbacks until resume() is called."""
        if self.suspended:
            return
        self._suspended_at = self.now()
        self._suspended_handles = [(h, self._suspended_at) for h in self.pending() if h.active]

    def resume(self) -> None:
        """
        Fire callbacks again. Every timer that waited out the suspension,
        including ones scheduled while suspended, is pushed back by the time
        it spent waiting.
        """
        if not self.suspended:
            return
        now = self.now()
        self._suspended_at = None
        handles, self._suspended_handles = self._suspended_handles, []
        for handle, since in handles:
            if handle.active:
                self._shift(handle, now - since)
        self._reorder()

    def _track(self, handle: TimerHandle) -> TimerHandle:
        if self.suspended:
            self._suspended_handles.append((handle, self.now()))
        return handle

    def _shift(self, handle: TimerHandle, delta_ms: float) -> None:
        raise NotImplementedError

    def _reorder(self) -> None:
        pass

    def _fire(self, handle: TimerHandle) -> None:
        if not handle.active:
            return
        handle.fired = True
        handle.callback(*handle.args)


class ManualTimers(TimerQueue):
    """
    A virtual clock. Time only passes through advance() or run_next().
    """

    def __init__(self, start_ms: float = 0.0):
        super().__init__()
        self._now = float(start_ms)
        self._heap: List[TimerHandle] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, delay_ms), next(self._seq), callback, args)
        heapq.heappush(self._heap, handle)
        return self._track(handle)

    def pending(self) -> List[TimerHandle]:
        return sorted(h for h in self._heap if h.active)

    def next_due(self) -> Optional[float]:
        self._drop_inactive()
        return self._heap[0].due if self._heap else None

    def _drop_inactive(self) -> None:
        while self._heap and not self._heap[0].active:
            heapq.heappop(self._heap)

    def _shift(self, handle: TimerHandle, delta_ms: float) -> None:
        handle.due += delta_ms

    def _reorder(self) -> None:
        heapq.heapify(self._heap)

    def run_next(self) -> bool:
        """
        Jump the clock to the earliest pending timer and fire it.

        Returns:
            False if nothing is pending or the queue is suspended.
        """
        if self.suspended:
            return False
        self._drop_inactive()
        if not self._heap:
            return False
        handle = heapq.heappop(self._heap)
        self._now = max(self._now, handle.due)
        self._fire(handle)
        return True

    def advance(self, ms: float) -> int:
        """
        Move the clock forward by `ms`, firing every timer that comes due.

        Returns:
            The number of callbacks fired.
        """
        target = self._now + ms
        fired = 0
        while not self.suspended:
            self._drop_inactive()
            if not self._heap or self._heap[0].due > target:
                break
            handle = heapq.heappop(self._heap)
            self._now = max(self._now, handle.due)
            self._fire(handle)
            fired += 1
        self._now = target
        return fired


class ScheduleTimers(TimerQueue):
    """
    Wall-clock timers on top of a private `schedule.Scheduler`.

    Each timer is a job that runs once and then cancels itself. run() drives
    the scheduler from the calling thread.
    """

    # schedule cannot express a zero-length period
    MIN_DELAY_MS = 1.0

    def __init__(self, scheduler: Optional[schedule.Scheduler] = None):
        super().__init__()
        self.scheduler = scheduler or schedule.Scheduler()
        self._jobs: Dict[int, schedule.Job] = {}
        self._handles: Dict[int, TimerHandle] = {}
        self._epoch = time.monotonic()

    def now(self) -> float:
        return (time.monotonic() - self._epoch) * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args) -> TimerHandle:
        delay_ms = max(self.MIN_DELAY_MS, delay_ms)
        handle = TimerHandle(self.now() + delay_ms, next(self._seq), callback, args)
        job = self.scheduler.every(delay_ms / 1000.0).seconds.do(self._run_job, handle)
        self._jobs[handle.seq] = job
        self._handles[handle.seq] = handle
        return self._track(handle)

    def _run_job(self, handle: TimerHandle):
        self._forget(handle)
        self._fire(handle)
        return schedule.CancelJob

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        if handle is None:
            return
        super().cancel(handle)
        job = self._jobs.get(handle.seq)
        if job is not None:
            self.scheduler.cancel_job(job)
        self._forget(handle)

    def _forget(self, handle: TimerHandle) -> None:
        self._jobs.pop(handle.seq, None)
        self._handles.pop(handle.seq, None)

    def pending(self) -> List[TimerHandle]:
        return sorted(h for h in self._handles.values() if h.active)

    def _shift(self, handle: TimerHandle, delta_ms: float) -> None:
        job = self._jobs.get(handle.seq)
        if job is None:
            return
        handle.due += delta_ms
        job.next_run = job.next_run + datetime.timedelta(milliseconds=delta_ms)

    def run_pending(self) -> None:
        if not self.suspended:
            self.scheduler.run_pending()

    def run(self, stop: Callable[[], bool], poll_seconds: float = 0.01) -> None:
        """Drive the scheduler until `stop()` returns True."""
        logger.debug("Timer loop started (poll=%ss)", poll_seconds)
        while not stop():
            self.run_pending()
            idle = self.scheduler.idle_seconds
            if idle is None or self.suspended:
                idle = poll_seconds
            time.sleep(min(max(idle, 0.0), poll_seconds))
        logger.debug("Timer loop stopped")
