"""
Auto-Advance Timer - Countdown on the thank-you screen

Starts at 15, ticks once per second, and fires the reset action once when it
reaches zero. The session cancels it when leaving thank-you early and starts
it fresh on every entry.
"""

import logging
from typing import Callable, Optional

from survey_kiosk.core.scheduling import TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_COUNTDOWN = 15
TICK_SECONDS = 1.0


class AutoAdvanceTimer:
    """Visible countdown that ends in a reset"""

    def __init__(
        self,
        scheduler,
        on_expire: Callable[[], None],
        start_from: int = DEFAULT_COUNTDOWN,
        interval: float = TICK_SECONDS,
    ):
        if start_from < 1:
            raise ValueError(f"Countdown must start at 1 or more, got {start_from}")

        self.scheduler = scheduler
        self.on_expire = on_expire
        self.start_from = start_from
        self.interval = interval
        self.remaining = start_from
        self._handle: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self) -> None:
        """(Re)start from the full countdown"""
        self.cancel()
        self.remaining = self.start_from
        self._handle = self.scheduler.call_later(self.interval, self._tick)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        self.remaining -= 1
        if self.remaining > 0:
            self._handle = self.scheduler.call_later(self.interval, self._tick)
            return

        self._handle = None
        logger.info("Thank-you countdown finished")
        self.on_expire()
