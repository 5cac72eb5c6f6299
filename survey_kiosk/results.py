"""
Result types returned across the kiosk boundaries.

- SaveResult: returned by PersistenceGateway.append()
- SessionView: read-only projection returned by QuestionnaireSession.view()
- CommandResult: returned by KioskController.handle()

These are the ONLY return types crossing into the host UI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from survey_kiosk.contracts import FormStep, SaveStatus, Screen


@dataclass(frozen=True)
class SaveResult:
    """
    Outcome of one append attempt against the external store.

    Attributes:
        success: True if the record was appended
        reason: Human-readable failure reason (None on success)
    """
    success: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "SaveResult":
        return cls(success=True)

    @classmethod
    def failed(cls, reason: str) -> "SaveResult":
        return cls(success=False, reason=reason)


@dataclass(frozen=True)
class SessionView:
    """
    Read-only projection of the session for rendering.

    Attributes:
        screen: Visible screen
        form_step: Questionnaire step (1 outside the form screen)
        errors: Validation Error Set (field name -> message)
        save_status: Persistence flag
        answers: Current Answer Set as a plain dict
        countdown: Seconds left before auto-return (thank-you screen only)
        generation: Session generation counter
    """
    screen: Screen
    form_step: FormStep
    errors: Dict[str, str] = field(default_factory=dict)
    save_status: SaveStatus = SaveStatus.IDLE
    answers: Dict[str, str] = field(default_factory=dict)
    countdown: Optional[int] = None
    generation: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'screen': self.screen.value,
            'form_step': int(self.form_step),
            'errors': dict(self.errors),
            'save_status': self.save_status.value,
            'answers': dict(self.answers),
            'countdown': self.countdown,
            'generation': self.generation,
        }


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a command handled by the KioskController.

    Commands that do not apply to the current screen (e.g. SubmitSurvey on
    the welcome screen, a second submit while saving) are not errors: they
    are ignored and reported with accepted=False.

    Attributes:
        accepted: Whether the command changed (or was allowed to touch) state
        view: Projection after handling the command
        command_type: Name of the handled command type
    """
    accepted: bool
    view: SessionView
    command_type: str
