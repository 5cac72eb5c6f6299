"""
Kiosk Controller - Host boundary around the questionnaire session

Responsibilities:
- Own the lock, scheduler, dispatcher, session and inactivity watchdog
- Translate command objects into session actions
- Count every visitor command as watchdog activity
- Tear everything down on shutdown()

Design principles:
- Commands in, CommandResult out; the host never touches the session
- One event at a time: commands, timer expiry and save completion all run
  under the same lock
"""

import logging
import threading

from survey_kiosk.commands import (
    AdvanceStep,
    GoBack,
    RegisterActivity,
    ResetSession,
    StartSurvey,
    SubmitSurvey,
    UpdateField,
)
from survey_kiosk.config import get_settings, get_sheets_settings
from survey_kiosk.core.auto_advance_timer import DEFAULT_COUNTDOWN
from survey_kiosk.core.inactivity_watchdog import DEFAULT_TIMEOUT_SECONDS, InactivityWatchdog
from survey_kiosk.core.questionnaire_session import QuestionnaireSession
from survey_kiosk.core.scheduling import ThreadingScheduler, ThreadPoolDispatcher
from survey_kiosk.persistence import build_gateway
from survey_kiosk.results import CommandResult, SessionView

logger = logging.getLogger(__name__)


class KioskController:
    """Single-kiosk runtime: session + watchdog behind one lock"""

    def __init__(
        self,
        gateway,
        scheduler=None,
        dispatcher=None,
        inactivity_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        countdown_seconds: int = DEFAULT_COUNTDOWN,
        lock=None,
    ):
        """
        Args:
            gateway: PersistenceGateway
            scheduler: Defaults to a ThreadingScheduler sharing the lock
            dispatcher: Defaults to a ThreadPoolDispatcher sharing the lock
            inactivity_timeout: Watchdog timeout in seconds
            countdown_seconds: Thank-you countdown start
            lock: Shared event lock (created if not given)
        """
        self.lock = lock if lock is not None else threading.RLock()
        self.scheduler = scheduler or ThreadingScheduler(self.lock)
        self.dispatcher = dispatcher or ThreadPoolDispatcher(self.lock)

        self.session = QuestionnaireSession(
            gateway,
            self.scheduler,
            self.dispatcher,
            countdown_seconds=countdown_seconds,
        )
        self.watchdog = InactivityWatchdog(
            self.scheduler,
            on_expire=lambda: self.session.reset(reason="inactivity"),
            timeout=inactivity_timeout,
        )
        self._running = False

    @classmethod
    def from_settings(cls, settings, gateway) -> "KioskController":
        return cls(
            gateway,
            inactivity_timeout=settings.inactivity_timeout_seconds,
            countdown_seconds=settings.thank_you_countdown_seconds,
        )

    def start(self) -> None:
        with self.lock:
            if self._running:
                return
            self._running = True
            self.watchdog.start()
        logger.info("Kiosk controller started")

    def shutdown(self) -> None:
        """Detach the watchdog, cancel timers, stop the save worker"""
        with self.lock:
            self._running = False
            self.watchdog.stop()
            self.session.close()
        shutdown = getattr(self.dispatcher, 'shutdown', None)
        if shutdown is not None:
            shutdown(wait=False)
        logger.info("Kiosk controller stopped")

    def view(self) -> SessionView:
        with self.lock:
            return self.session.view()

    def handle(self, command) -> CommandResult:
        """
        Process one command.

        Raises:
            TypeError: If command is not a known command type
        """
        with self.lock:
            if isinstance(command, RegisterActivity):
                accepted = self.watchdog.observe(command.event_type)
            else:
                self.watchdog.notify()
                accepted = self._dispatch(command)

            return CommandResult(
                accepted=accepted,
                view=self.session.view(),
                command_type=type(command).__name__,
            )

    def _dispatch(self, command) -> bool:
        session = self.session

        if isinstance(command, StartSurvey):
            return session.start()
        if isinstance(command, UpdateField):
            return session.update_field(command.field, command.value)
        if isinstance(command, AdvanceStep):
            return session.advance()
        if isinstance(command, GoBack):
            return session.go_back()
        if isinstance(command, SubmitSurvey):
            return session.submit()
        if isinstance(command, ResetSession):
            session.reset(reason=command.reason)
            return True

        raise TypeError(f"Unknown command type: {type(command).__name__}")


def build_controller(settings=None, gateway=None) -> KioskController:
    """Build a controller from settings, choosing the configured gateway"""
    settings = settings or get_settings()
    if gateway is None:
        gateway = build_gateway(settings, get_sheets_settings())
    return KioskController.from_settings(settings, gateway)
