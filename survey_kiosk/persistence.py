"""
Survey response persistence.

One append per submission into an append-only store. The gateway is the
boundary between the kiosk and the outside world: nothing raised by the
transport, the credentials or the configuration escapes append(); every
fault becomes SaveResult.failed(reason).

Implementations:
- SheetsGateway: first worksheet of a Google spreadsheet (gspread)
- LocalFileGateway: one JSON file per response on local disk
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import gspread
from google.oauth2.service_account import Credentials

from survey_kiosk.config import GoogleSheetsSettings
from survey_kiosk.contracts import AnswerSet
from survey_kiosk.results import SaveResult
from survey_kiosk.utils.field_mappings import build_sheet_record, record_to_row
from survey_kiosk.utils.helpers import generate_response_filename

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class PersistenceError(Exception):
    """Raised inside a gateway; converted to SaveResult at the boundary"""


class PersistenceGateway(ABC):
    """
    Append one completed Answer Set to an external store.

    Subclasses implement _write(record). append() owns the failure
    translation, so subclasses may raise freely.
    """

    failure_reason = "Falha ao salvar dados"

    def append(self, answers: AnswerSet, submitted_at: Optional[datetime] = None) -> SaveResult:
        """
        Perform exactly one append attempt.

        Args:
            answers: Answer Set with all five fields populated
            submitted_at: Submission time written to the record

        Returns:
            SaveResult: ok() on success, failed(reason) on any fault
        """
        try:
            self._write(build_sheet_record(answers, submitted_at))
        except Exception as e:
            logger.error(f"{type(self).__name__} append failed: {e}")
            return SaveResult.failed(f"{self.failure_reason}: {e}")

        logger.info(f"{type(self).__name__} appended response")
        return SaveResult.ok()

    @abstractmethod
    def _write(self, record: Dict[str, str]) -> None:
        """Write one record. May raise."""


class SheetsGateway(PersistenceGateway):
    """
    Google Sheets gateway.

    Rows are matched to the sheet's header row (row 1) by column name, so
    the sheet owner may reorder or add columns.
    """

    failure_reason = "Falha ao salvar dados na planilha"

    def __init__(self, settings: GoogleSheetsSettings, client_factory=None):
        """
        Args:
            settings: Credentials and spreadsheet key
            client_factory: Callable(settings) -> gspread client. Defaults to
                service-account authorization; injectable for tests.
        """
        self.settings = settings
        self.client_factory = client_factory or authorize_client

    def _write(self, record: Dict[str, str]) -> None:
        worksheet = self._open_worksheet()
        header = worksheet.row_values(1)
        if not header:
            raise PersistenceError("Sheet has no header row")
        worksheet.append_row(record_to_row(record, header), value_input_option="USER_ENTERED")

    def _open_worksheet(self):
        if not self.settings.is_complete:
            raise PersistenceError("Google Sheets credentials or sheet id not configured")

        client = self.client_factory(self.settings)
        spreadsheet = client.open_by_key(self.settings.sheet_id)
        return spreadsheet.get_worksheet(0)


def authorize_client(settings: GoogleSheetsSettings) -> gspread.Client:
    """Authorize a gspread client from service-account email + key"""
    info = {
        "type": "service_account",
        "client_email": settings.service_account_email,
        "private_key": settings.private_key,
        "token_uri": TOKEN_URI,
    }
    credentials = Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
    return gspread.authorize(credentials)


class LocalFileGateway(PersistenceGateway):
    """
    Append-only JSON files, one per response.

    Layout:
        outputs/responses/
            response_20250307_090502_a3f7e2b9.json
            ...

    Design:
    - Never overwrite (double-submit guard)
    - One file per submission
    """

    failure_reason = "Falha ao salvar dados localmente"

    def __init__(self, base_dir: str = "outputs/responses"):
        self.base_dir = Path(base_dir)
        logger.info(f"LocalFileGateway initialized: {self.base_dir}")

    def _write(self, record: Dict[str, str]) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.base_dir / generate_response_filename()

        if filepath.exists():
            raise FileExistsError(f"Response file already exists: {filepath}")

        with open(filepath, 'x', encoding='utf-8') as f:
            json.dump(record, f, indent=2, ensure_ascii=False)

    def count(self) -> int:
        """Number of stored responses"""
        if not self.base_dir.exists():
            return 0
        return len(list(self.base_dir.glob("response_*.json")))


def build_gateway(settings, sheets_settings: Optional[GoogleSheetsSettings] = None) -> PersistenceGateway:
    """Create the gateway selected by KioskSettings.persistence_backend"""
    if settings.persistence_backend == "local":
        return LocalFileGateway(settings.responses_dir)
    return SheetsGateway(sheets_settings or GoogleSheetsSettings())
