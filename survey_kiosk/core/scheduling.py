"""
Scheduling - Owned timer handles and the asynchronous submission runner

Responsibilities:
- Schedule delayed callbacks that can be cancelled (TimerHandle)
- Run the persistence call off the event stream and deliver its result back
- Keep every callback serialized with the rest of the kiosk events

Design principles:
- Timers are explicit resource handles, never module-level globals
- A cancelled handle never runs its callback, even if its thread already woke up
- Real implementations serialize on one shared lock; manual implementations
  run only when the caller advances them (tests, console replay)

Contents:
- TimerHandle
- ThreadingScheduler / ManualScheduler: call_later(delay, callback) -> TimerHandle
- ThreadPoolDispatcher / DeferredDispatcher: submit(job, on_done)
"""

import heapq
import itertools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

from survey_kiosk.results import SaveResult

logger = logging.getLogger(__name__)

Callback = Callable[[], None]
SaveJob = Callable[[], SaveResult]
SaveCallback = Callable[[SaveResult], None]


class TimerHandle:
    """Cancelable handle for one scheduled callback"""

    def __init__(self, timer: Optional[threading.Timer] = None):
        self._timer = timer
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()


class ThreadingScheduler:
    """
    Scheduler backed by threading.Timer.

    Every callback runs while holding the shared lock, so timer expiry is
    processed one event at a time together with host commands.
    """

    def __init__(self, lock=None):
        self.lock = lock if lock is not None else threading.RLock()

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle()
        timer = threading.Timer(delay, self._fire, args=(handle, callback))
        timer.daemon = True
        handle._timer = timer
        timer.start()
        return handle

    def _fire(self, handle: TimerHandle, callback: Callback) -> None:
        with self.lock:
            if not handle.active:
                return
            handle.fired = True
            try:
                callback()
            except Exception:
                logger.exception("Timer callback failed")


class ManualScheduler:
    """
    Deterministic scheduler driven by advance().

    Time only moves when the caller advances it; due callbacks run in
    deadline order on the caller's thread.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle, Callback]] = []
        self._sequence = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._sequence), handle, callback))
        return handle

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every callback due on the way"""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.now = due
            if not handle.active:
                continue
            handle.fired = True
            callback()
        self.now = target

    def pending(self) -> int:
        """Number of scheduled callbacks that are still active"""
        return sum(1 for _, _, handle, _ in self._queue if handle.active)


def _run_job(job: SaveJob) -> SaveResult:
    try:
        return job()
    except Exception as e:
        logger.error(f"Save job raised instead of returning a result: {e}")
        return SaveResult.failed(str(e))


class ThreadPoolDispatcher:
    """
    Runs save jobs on a worker thread.

    The completion callback is delivered from the worker thread while holding
    the shared lock, so it is always a separate event from the submit that
    queued it. Completions arriving after shutdown() are dropped.
    """

    def __init__(self, lock=None, max_workers: int = 1):
        self.lock = lock if lock is not None else threading.RLock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="kiosk-save")
        self._closed = False

    def submit(self, job: SaveJob, on_done: SaveCallback) -> Future:
        return self._executor.submit(self._run_and_deliver, job, on_done)

    def _run_and_deliver(self, job: SaveJob, on_done: SaveCallback) -> None:
        result = _run_job(job)
        with self.lock:
            if self._closed:
                logger.info("Dropping save result delivered after shutdown")
                return
            try:
                on_done(result)
            except Exception:
                logger.exception("Save completion callback failed")

    def shutdown(self, wait: bool = True) -> None:
        with self.lock:
            self._closed = True
        self._executor.shutdown(wait=wait)


class DeferredDispatcher:
    """
    Holds save jobs until run_pending() is called.

    Lets tests observe the 'saving' window and deliver results late.
    """

    def __init__(self):
        self._pending: List[Tuple[SaveJob, SaveCallback]] = []

    def submit(self, job: SaveJob, on_done: SaveCallback) -> None:
        self._pending.append((job, on_done))

    def run_pending(self) -> int:
        """Run every queued job and deliver its result. Returns jobs run."""
        jobs, self._pending = self._pending, []
        for job, on_done in jobs:
            on_done(_run_job(job))
        return len(jobs)

    def pending(self) -> int:
        return len(self._pending)

    def shutdown(self, wait: bool = True) -> None:
        self._pending = []
