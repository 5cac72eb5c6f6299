"""
Questionnaire Session - Kiosk screen state machine

Responsibilities:
- Own the Session State (screen, form step, save status) and the Answer Set
- Gate step advancement on FieldValidator results
- Hand the completed Answer Set to the PersistenceGateway on submit
- Own the thank-you AutoAdvanceTimer (start on entry, cancel on exit)

States (no terminal state, the machine cycles):
    welcome --start--> form.step1 --advance--> form.step2 --submit--> thank-you
    form.step2 --back--> form.step1
    thank-you --reset (countdown / user)--> welcome
    any --reset (inactivity)--> welcome

Design principles:
- Single-threaded: callers deliver one event at a time
- Actions that do not apply to the current state are ignored and logged,
  never raised (return False)
- The thank-you screen is shown before the persistence result is known;
  failure only changes save_status, never the screen
- Every submission is tagged with the session generation; a result that
  arrives after a reset belongs to an older generation and is dropped
"""

import logging
from typing import Dict, Optional

from survey_kiosk.contracts import (
    AnswerSet,
    FIELD_NAMES,
    FormStep,
    IDENTITY_NUMBER,
    SaveStatus,
    Screen,
)
from survey_kiosk.core.auto_advance_timer import AutoAdvanceTimer, DEFAULT_COUNTDOWN
from survey_kiosk.core.field_validator import (
    normalize_choice,
    normalize_identity_number,
    validate_step,
)
from survey_kiosk.results import SaveResult, SessionView

logger = logging.getLogger(__name__)


class QuestionnaireSession:
    """Welcome / form / thank-you state machine for one kiosk"""

    def __init__(self, gateway, scheduler, dispatcher, countdown_seconds: int = DEFAULT_COUNTDOWN):
        """
        Args:
            gateway: PersistenceGateway (append(answers) -> SaveResult)
            scheduler: Object with call_later(delay, callback) -> TimerHandle
            dispatcher: Object with submit(job, on_done) running the save job
            countdown_seconds: Thank-you countdown start value

        Raises:
            TypeError: If gateway or dispatcher lack the required methods
        """
        if not callable(getattr(gateway, 'append', None)):
            raise TypeError("gateway must have callable append() method")
        if not callable(getattr(dispatcher, 'submit', None)):
            raise TypeError("dispatcher must have callable submit() method")

        self.gateway = gateway
        self.dispatcher = dispatcher
        self.countdown = AutoAdvanceTimer(
            scheduler,
            on_expire=lambda: self.reset(reason="countdown"),
            start_from=countdown_seconds,
        )

        self.screen = Screen.WELCOME
        self.form_step = FormStep.PERSONAL
        self.save_status = SaveStatus.IDLE
        self.answers = AnswerSet()
        self.errors: Dict[str, str] = {}
        self.generation = 0

    # ========================
    # Read-only projection
    # ========================

    def view(self) -> SessionView:
        return SessionView(
            screen=self.screen,
            form_step=self.form_step,
            errors=dict(self.errors),
            save_status=self.save_status,
            answers=self.answers.to_dict(),
            countdown=self.countdown.remaining if self.screen is Screen.THANK_YOU else None,
            generation=self.generation,
        )

    # ========================
    # Actions
    # ========================

    def start(self) -> bool:
        """welcome -> form.step1 with a fresh Answer Set"""
        if self.screen is not Screen.WELCOME:
            logger.warning(f"Ignoring start on screen '{self.screen.value}'")
            return False

        self.generation += 1
        self._clear()
        self.screen = Screen.FORM
        logger.info(f"Session {self.generation} started")
        return True

    def update_field(self, field_name: str, value: Optional[str]) -> bool:
        """
        Store one normalized field value and clear its validation error.

        Returns:
            bool: False if ignored (not on form, unknown field, unknown choice)
        """
        if self.screen is not Screen.FORM:
            logger.warning(f"Ignoring update of '{field_name}' on screen '{self.screen.value}'")
            return False
        if field_name not in FIELD_NAMES:
            logger.warning(f"Ignoring update of unknown field '{field_name}'")
            return False

        if field_name == IDENTITY_NUMBER:
            normalized = normalize_identity_number(value)
        else:
            normalized = normalize_choice(field_name, value)
            if normalized is None:
                logger.warning(f"Ignoring unknown option '{value}' for field '{field_name}'")
                return False

        self.answers = self.answers.with_field(field_name, normalized)
        self.errors.pop(field_name, None)
        return True

    def advance(self) -> bool:
        """form.step1 -> form.step2 if step 1 validates"""
        if self.screen is not Screen.FORM or self.form_step is not FormStep.PERSONAL:
            logger.warning("Ignoring advance outside form step 1")
            return False

        self.errors = validate_step(self.answers, FormStep.PERSONAL)
        if self.errors:
            logger.info(f"Step 1 incomplete: {sorted(self.errors)}")
            return False

        self.form_step = FormStep.CONSULTATION
        return True

    def go_back(self) -> bool:
        """form.step2 -> form.step1, no validation"""
        if self.screen is not Screen.FORM or self.form_step is not FormStep.CONSULTATION:
            logger.warning("Ignoring back outside form step 2")
            return False

        self.form_step = FormStep.PERSONAL
        return True

    def submit(self) -> bool:
        """
        form.step2 -> thank-you if step 2 validates; persistence starts async.

        The screen changes immediately with save_status = saving. The
        gateway result later flips save_status in place.
        """
        if self.save_status is SaveStatus.SAVING:
            logger.warning("Ignoring submit while a submission is saving")
            return False
        if self.screen is not Screen.FORM or self.form_step is not FormStep.CONSULTATION:
            logger.warning("Ignoring submit outside form step 2")
            return False

        self.errors = validate_step(self.answers, FormStep.CONSULTATION)
        if self.errors:
            logger.info(f"Step 2 incomplete: {sorted(self.errors)}")
            return False

        generation = self.generation
        submitted = self.answers
        self.save_status = SaveStatus.SAVING
        self.screen = Screen.THANK_YOU
        self.countdown.start()
        logger.info(f"Session {generation} submitted, saving")

        self.dispatcher.submit(
            lambda: self.gateway.append(submitted),
            lambda result: self.apply_save_result(generation, result),
        )
        return True

    def apply_save_result(self, generation: int, result: SaveResult) -> bool:
        """
        Apply a persistence outcome to the session that submitted it.

        Returns:
            bool: False if the result belongs to an older generation
        """
        if generation != self.generation or self.save_status is not SaveStatus.SAVING:
            logger.info(f"Dropping stale save result for session {generation} (current {self.generation})")
            return False

        if result.success:
            self.save_status = SaveStatus.SUCCESS
            logger.info(f"Session {generation} saved")
        else:
            self.save_status = SaveStatus.ERROR
            logger.error(f"Session {generation} not saved: {result.reason}")
        return True

    def reset(self, reason: str = "user") -> None:
        """
        Any state -> welcome, discarding the Answer Set.

        A reset at a clean welcome screen leaves the projection unchanged.
        """
        self.countdown.cancel()

        if self.screen is Screen.WELCOME and self.answers.is_empty() and self.save_status is SaveStatus.IDLE:
            return

        logger.info(f"Session {self.generation} reset ({reason}) from '{self.screen.value}'")
        self.generation += 1
        self._clear()
        self.screen = Screen.WELCOME

    def close(self) -> None:
        """Teardown: release the countdown timer and orphan any in-flight save"""
        self.countdown.cancel()
        self.generation += 1

    # ========================
    # Private Helpers
    # ========================

    def _clear(self) -> None:
        self.answers = AnswerSet()
        self.errors = {}
        self.form_step = FormStep.PERSONAL
        self.save_status = SaveStatus.IDLE
