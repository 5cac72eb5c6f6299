"""
Inactivity Watchdog - Force the kiosk back to welcome when nobody is using it

Responsibilities:
- Keep a single deadline, re-armed on every qualifying input event
- Fire the reset callback once when the deadline elapses, then re-arm
- Release the timer on stop() so nothing fires after teardown
"""

import logging
from typing import Callable, FrozenSet, Iterable, Optional

from survey_kiosk.core.scheduling import TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 3 * 60

# Discrete input events forwarded by the host page
QUALIFYING_EVENTS = frozenset({"mousedown", "pointerdown", "touchstart", "keydown"})


class InactivityWatchdog:
    """Deadline timer reset by visitor input"""

    def __init__(
        self,
        scheduler,
        on_expire: Callable[[], None],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        events: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            scheduler: Object with call_later(delay, callback) -> TimerHandle
            on_expire: Reset action fired when the deadline elapses
            timeout: Seconds without input before on_expire fires
            events: Qualifying event types (defaults to QUALIFYING_EVENTS)

        Raises:
            ValueError: If timeout is not positive
        """
        if timeout <= 0:
            raise ValueError(f"Inactivity timeout must be positive, got {timeout}")

        self.scheduler = scheduler
        self.on_expire = on_expire
        self.timeout = timeout
        self.events: FrozenSet[str] = frozenset(events) if events is not None else QUALIFYING_EVENTS
        self.expirations = 0
        self._handle: Optional[TimerHandle] = None
        self._running = False

    @property
    def armed(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self) -> None:
        """Begin observing; arms the first deadline"""
        self._running = True
        self._arm()
        logger.info(f"Inactivity watchdog started (timeout {self.timeout}s)")

    def observe(self, event_type: str) -> bool:
        """
        Feed one input event.

        Returns:
            bool: True if the event qualified and re-armed the deadline
        """
        if event_type not in self.events:
            return False
        self.notify()
        return True

    def notify(self) -> None:
        """Record activity: push the deadline to now + timeout"""
        if self._running:
            self._arm()

    def stop(self) -> None:
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        logger.info("Inactivity watchdog stopped")

    def _arm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self.scheduler.call_later(self.timeout, self._expire)

    def _expire(self) -> None:
        if not self._running:
            return
        self.expirations += 1
        self._handle = None
        logger.info(f"No input for {self.timeout}s, resetting kiosk")
        try:
            self.on_expire()
        finally:
            if self._running:
                self._arm()
