"""
Field Mappings - Option catalogs and display labels for questionnaire fields

Responsibilities:
- Define the closed option set of every choice field
- Map option codes to the labels written to the spreadsheet
- Build the spreadsheet record for a completed Answer Set

Design principles:
- Single source of truth for option codes
- Return raw code if no label found (don't block the write)
- Label mapping is a presentation concern applied at the persistence boundary
"""

from datetime import datetime
from typing import Dict, List, Optional

from survey_kiosk.contracts import (
    AnswerSet,
    CONSULTATION_FREQUENCY,
    CONSULTED_PROFESSIONAL,
    DEMOGRAPHIC_CATEGORY,
    HAS_COVERAGE,
)
from survey_kiosk.utils.helpers import format_submission_timestamp

# Demographic category (sexo)
DEMOGRAPHIC_OPTIONS = {
    'masculino': 'Masculino',
    'feminino': 'Feminino',
    'outro': 'Outro',
}

# Consulted professional
PROFESSIONAL_OPTIONS = {
    'dr-silva': 'Dr. Silva - Clínico Geral',
    'dra-santos': 'Dra. Santos - Cardiologista',
    'dr-oliveira': 'Dr. Oliveira - Ortopedista',
    'dra-costa': 'Dra. Costa - Dermatologista',
    'dr-pereira': 'Dr. Pereira - Neurologista',
}

# Health plan coverage
COVERAGE_OPTIONS = {
    'sim': 'Sim',
    'nao': 'Não',
}

# Consultation frequency
FREQUENCY_OPTIONS = {
    'primeira-vez': 'Primeira vez',
    'mensal': 'Mensalmente',
    'trimestral': 'A cada 3 meses',
    'semestral': 'A cada 6 meses',
    'anual': 'Anualmente',
    'raramente': 'Raramente',
}

# Choice field -> option catalog
FIELD_OPTIONS: Dict[str, Dict[str, str]] = {
    DEMOGRAPHIC_CATEGORY: DEMOGRAPHIC_OPTIONS,
    CONSULTED_PROFESSIONAL: PROFESSIONAL_OPTIONS,
    HAS_COVERAGE: COVERAGE_OPTIONS,
    CONSULTATION_FREQUENCY: FREQUENCY_OPTIONS,
}

# Spreadsheet header row, in column order
SHEET_COLUMNS = [
    'CPF',
    'Sexo',
    'Profissional',
    'Possui Plano',
    'Frequência',
    'Data de Preenchimento',
]


def get_label(field_name: str, code: str) -> str:
    """
    Map an option code to its display label.

    Args:
        field_name: Choice field name
        code: Option code as stored in the Answer Set

    Returns:
        str: Display label, or the code itself if unmapped

    Examples:
        >>> get_label('consultation_frequency', 'mensal')
        'Mensalmente'
        >>> get_label('consultation_frequency', 'semanal')
        'semanal'
    """
    return FIELD_OPTIONS.get(field_name, {}).get(code, code)


def build_sheet_record(answers: AnswerSet, submitted_at: Optional[datetime] = None) -> Dict[str, str]:
    """
    Translate a completed Answer Set into a spreadsheet record.

    Args:
        answers: Answer Set with all five fields populated
        submitted_at: Submission time (defaults to now, local time)

    Returns:
        dict: Column header -> cell value, keys in SHEET_COLUMNS order
    """
    return {
        'CPF': answers.identity_number,
        'Sexo': get_label(DEMOGRAPHIC_CATEGORY, answers.demographic_category),
        'Profissional': get_label(CONSULTED_PROFESSIONAL, answers.consulted_professional),
        'Possui Plano': get_label(HAS_COVERAGE, answers.has_coverage),
        'Frequência': get_label(CONSULTATION_FREQUENCY, answers.consultation_frequency),
        'Data de Preenchimento': format_submission_timestamp(submitted_at),
    }


def record_to_row(record: Dict[str, str], columns: Optional[List[str]] = None) -> List[str]:
    """
    Order record values by a header row for a positional append.

    Columns missing from the record become empty cells, so a sheet with
    extra or reordered headers still receives every known value.
    """
    return [record.get(column, '') for column in (columns or SHEET_COLUMNS)]


def options_catalog() -> Dict[str, List[Dict[str, str]]]:
    """Option lists for the UI, preserving catalog order."""
    return {
        field_name: [{'value': code, 'label': label} for code, label in options.items()]
        for field_name, options in FIELD_OPTIONS.items()
    }
