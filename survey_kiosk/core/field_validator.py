"""
Field Validator - Structural checks and normalization for questionnaire fields

Responsibilities:
- Normalize raw input before it enters the Answer Set
- Validate the fields of one questionnaire step
- Produce the Validation Error Set (field name -> message)

Design principles:
- Pure functions, no side effects, no logging
- Validation is structural only (presence, digit count, catalog membership)
- Messages are the visitor-facing copy shown next to each field
"""

import re
from typing import Dict, Optional

from survey_kiosk.contracts import (
    AnswerSet,
    CONSULTATION_FREQUENCY,
    CONSULTED_PROFESSIONAL,
    DEMOGRAPHIC_CATEGORY,
    FormStep,
    HAS_COVERAGE,
    IDENTITY_NUMBER,
    STEP_FIELDS,
)
from survey_kiosk.utils.field_mappings import FIELD_OPTIONS

IDENTITY_NUMBER_LENGTH = 11

_NON_DIGITS = re.compile(r"\D")
_IDENTITY_PATTERN = re.compile(r"^\d{%d}$" % IDENTITY_NUMBER_LENGTH)

MSG_IDENTITY_REQUIRED = "CPF é obrigatório"
MSG_IDENTITY_LENGTH = "CPF deve conter 11 dígitos"

# Message shown when a choice field is unanswered
CHOICE_MESSAGES = {
    DEMOGRAPHIC_CATEGORY: "Selecione o sexo",
    CONSULTED_PROFESSIONAL: "Selecione o profissional",
    HAS_COVERAGE: "Informe se possui plano",
    CONSULTATION_FREQUENCY: "Selecione a frequência",
}


def normalize_identity_number(raw: Optional[str]) -> str:
    """
    Strip every non-digit character and keep at most 11 digits.

    Applied on every keystroke, not only at validation time.

    Examples:
        >>> normalize_identity_number("123.456.789-01")
        '12345678901'
        >>> normalize_identity_number("12a3-4567/890x")
        '1234567890'
    """
    digits = _NON_DIGITS.sub("", raw or "")
    return digits[:IDENTITY_NUMBER_LENGTH]


def normalize_choice(field_name: str, raw: Optional[str]) -> Optional[str]:
    """
    Return the option code if it belongs to the field's catalog.

    An empty value is a valid "unanswered" choice and returns "".

    Returns:
        str or None: Normalized code, or None if the code is unknown
    """
    value = (raw or "").strip()
    if not value:
        return ""
    if value in FIELD_OPTIONS.get(field_name, {}):
        return value
    return None


def _validate_identity_number(value: str) -> Optional[str]:
    if not value:
        return MSG_IDENTITY_REQUIRED
    if not _IDENTITY_PATTERN.match(value):
        return MSG_IDENTITY_LENGTH
    return None


def _validate_choice(field_name: str, value: str) -> Optional[str]:
    if not value or value not in FIELD_OPTIONS[field_name]:
        return CHOICE_MESSAGES[field_name]
    return None


def validate_step(answers: AnswerSet, step: FormStep) -> Dict[str, str]:
    """
    Validate exactly the fields that belong to one questionnaire step.

    Args:
        answers: Current Answer Set
        step: FormStep.PERSONAL (1) or FormStep.CONSULTATION (2)

    Returns:
        dict: Validation Error Set; empty when the step is complete
    """
    errors: Dict[str, str] = {}

    for field_name in STEP_FIELDS[FormStep(step)]:
        value = answers.get(field_name)
        if field_name == IDENTITY_NUMBER:
            message = _validate_identity_number(value)
        else:
            message = _validate_choice(field_name, value)
        if message:
            errors[field_name] = message

    return errors
