"""
Semantic contracts for the survey kiosk.

This module defines the value types shared between the session state machine,
the field validator, the persistence gateway and the host UI. These are NOT
validators - they define shape and semantics without enforcing rules.

Design principles:
- Closed sets are string enums (JSON friendly, no class hierarchies)
- AnswerSet is frozen; every edit produces a new instance
- No dependencies on other modules

Contents:
- Screen: which kiosk screen is visible
- FormStep: which questionnaire step is visible while on the form
- SaveStatus: outcome flag of the persistence call
- AnswerSet: the draft questionnaire response for one visitor

Usage:
    from survey_kiosk.contracts import AnswerSet, Screen, SaveStatus
"""

from dataclasses import asdict, dataclass, replace
from enum import Enum, IntEnum
from typing import Dict, Tuple


class Screen(str, Enum):
    """
    Kiosk screen currently shown to the visitor.

    Cycle: WELCOME -> FORM -> THANK_YOU -> WELCOME (no terminal state).
    """
    WELCOME = "welcome"
    FORM = "form"
    THANK_YOU = "thank-you"


class FormStep(IntEnum):
    """Questionnaire step. Only meaningful while screen is FORM."""
    PERSONAL = 1
    CONSULTATION = 2


class SaveStatus(str, Enum):
    """
    Persistence outcome flag consumed by the thank-you screen.

    Values:
        IDLE: No submission started for the current session generation.
        SAVING: Submission handed to the gateway, result pending.
        SUCCESS: Gateway appended the record.
        ERROR: Gateway reported a failure (or faulted).
    """
    IDLE = "idle"
    SAVING = "saving"
    SUCCESS = "success"
    ERROR = "error"


# Field names, in questionnaire order
IDENTITY_NUMBER = "identity_number"
DEMOGRAPHIC_CATEGORY = "demographic_category"
CONSULTED_PROFESSIONAL = "consulted_professional"
HAS_COVERAGE = "has_coverage"
CONSULTATION_FREQUENCY = "consultation_frequency"

FIELD_NAMES: Tuple[str, ...] = (
    IDENTITY_NUMBER,
    DEMOGRAPHIC_CATEGORY,
    CONSULTED_PROFESSIONAL,
    HAS_COVERAGE,
    CONSULTATION_FREQUENCY,
)

STEP_FIELDS: Dict[FormStep, Tuple[str, ...]] = {
    FormStep.PERSONAL: (IDENTITY_NUMBER, DEMOGRAPHIC_CATEGORY),
    FormStep.CONSULTATION: (CONSULTED_PROFESSIONAL, HAS_COVERAGE, CONSULTATION_FREQUENCY),
}


@dataclass(frozen=True)
class AnswerSet:
    """
    Draft questionnaire response for one visitor session.

    Every attribute is either "" (unanswered) or an already-normalized value.
    Normalization happens before construction (see core.field_validator), so
    an AnswerSet never carries a partial or malformed value.

    Lifecycle:
    1. Created empty when the session enters the form screen
    2. Replaced field-by-field via with_field() as the visitor interacts
    3. Either copied into a persistence request or discarded on reset

    Attributes:
        identity_number: CPF, digits only, target length 11
        demographic_category: 'masculino' | 'feminino' | 'outro'
        consulted_professional: professional code, e.g. 'dr-silva'
        has_coverage: 'sim' | 'nao'
        consultation_frequency: frequency bucket, e.g. 'mensal'

    Examples:
        >>> answers = AnswerSet().with_field('has_coverage', 'sim')
        >>> answers.has_coverage
        'sim'
        >>> answers.is_empty()
        False
    """
    identity_number: str = ""
    demographic_category: str = ""
    consulted_professional: str = ""
    has_coverage: str = ""
    consultation_frequency: str = ""

    def get(self, field_name: str) -> str:
        if field_name not in FIELD_NAMES:
            raise KeyError(f"Unknown questionnaire field: {field_name}")
        return getattr(self, field_name)

    def with_field(self, field_name: str, value: str) -> "AnswerSet":
        """
        Return a copy with one field replaced.

        Raises:
            KeyError: If field_name is not a questionnaire field
        """
        if field_name not in FIELD_NAMES:
            raise KeyError(f"Unknown questionnaire field: {field_name}")
        return replace(self, **{field_name: value})

    def is_empty(self) -> bool:
        return all(not getattr(self, name) for name in FIELD_NAMES)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
