"""
Utility helpers for the survey kiosk

Naming of stored responses and the pt-BR submission timestamp.
"""

import uuid
from datetime import datetime

# pt-BR locale string as shown in the spreadsheet ("07/03/2025, 09:05:02")
SUBMISSION_TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"


def generate_response_filename(moment=None):
    """
    Name for one stored response: response_{YYYYMMDD_HHMMSS}_{8 hex}.json

    The random suffix keeps two submissions within the same second apart.

    Examples:
        >>> generate_response_filename(datetime(2025, 3, 7, 9, 5, 2))
        'response_20250307_090502_a3f7e2b9.json'
    """
    moment = moment or datetime.now()
    return f"response_{moment:%Y%m%d_%H%M%S}_{uuid.uuid4().hex[:8]}.json"


def format_submission_timestamp(moment=None):
    """
    Format a submission time the way the spreadsheet column expects (pt-BR)

    Examples:
        >>> format_submission_timestamp(datetime(2025, 3, 7, 9, 5, 2))
        '07/03/2025, 09:05:02'
    """
    moment = moment or datetime.now()
    return moment.strftime(SUBMISSION_TIMESTAMP_FORMAT)
