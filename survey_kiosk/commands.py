"""
Command types for KioskController control flow.

Commands are the ONLY public interface the host UI uses to drive the kiosk.
Every command except RegisterActivity maps to one QuestionnaireSession action;
all of them count as visitor activity for the inactivity watchdog.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StartSurvey:
    """
    Leave the welcome screen and open questionnaire step 1.

    Resets the Answer Set and save status.
    """
    pass


@dataclass(frozen=True)
class UpdateField:
    """
    Edit one questionnaire field.

    The value is normalized before it is stored (identity number is reduced
    to at most 11 digits; choices must belong to the field's catalog).
    """
    field: str
    value: str


@dataclass(frozen=True)
class AdvanceStep:
    """Validate step 1 and move to step 2 if clean."""
    pass


@dataclass(frozen=True)
class GoBack:
    """Return from step 2 to step 1. Never validated."""
    pass


@dataclass(frozen=True)
class SubmitSurvey:
    """
    Validate step 2, show the thank-you screen and persist the answers.

    Ignored while a submission is already saving.
    """
    pass


@dataclass(frozen=True)
class ResetSession:
    """
    Return to the welcome screen, discarding the Answer Set.

    reason is informational (logged): 'user', 'countdown', 'inactivity'.
    """
    reason: str = "user"


@dataclass(frozen=True)
class RegisterActivity:
    """
    A raw input event observed by the host (pointer, touch, key).

    Only re-arms the inactivity watchdog; never changes the session.
    """
    event_type: str


# Command union type for type hints
Command = StartSurvey | UpdateField | AdvanceStep | GoBack | SubmitSurvey | ResetSession | RegisterActivity
