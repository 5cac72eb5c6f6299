"""
Kiosk settings using Pydantic Settings.

Environment variables:
- KIOSK_INACTIVITY_TIMEOUT_SECONDS: seconds without input before reset (180)
- KIOSK_THANK_YOU_COUNTDOWN_SECONDS: thank-you countdown start (15)
- KIOSK_PERSISTENCE_BACKEND: 'sheets' or 'local'
- KIOSK_RESPONSES_DIR: directory for the 'local' backend
- KIOSK_LOG_LEVEL: logging level name
- GOOGLE_SERVICE_ACCOUNT_EMAIL, GOOGLE_PRIVATE_KEY, GOOGLE_SHEET_ID: spreadsheet
  credentials and destination

Missing Google credentials are not a startup error: the Sheets gateway reports
them as a failed save.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PERSISTENCE_BACKENDS = ("sheets", "local")


class KioskSettings(BaseSettings):
    """Kiosk behaviour configuration."""

    model_config = SettingsConfigDict(
        env_prefix="KIOSK_",
        extra="ignore",
    )

    inactivity_timeout_seconds: float = Field(default=180.0, gt=0, description="Idle seconds before reset")
    thank_you_countdown_seconds: int = Field(default=15, ge=1, description="Thank-you countdown start")
    persistence_backend: str = Field(default="sheets", description="sheets or local")
    responses_dir: str = Field(default="outputs/responses", description="Directory for the local backend")
    log_level: str = Field(default="INFO", description="Logging level name")

    @field_validator("persistence_backend")
    @classmethod
    def backend_must_be_known(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in PERSISTENCE_BACKENDS:
            raise ValueError(f"persistence_backend must be one of {list(PERSISTENCE_BACKENDS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        v = v.strip().upper()
        # getLevelName returns the numeric level for registered names only
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"log_level must be a logging level name, got '{v}'")
        return v


class GoogleSheetsSettings(BaseSettings):
    """Service account credentials and destination spreadsheet."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_",
        extra="ignore",
    )

    service_account_email: str = Field(default="", description="Service account client email")
    private_key: str = Field(default="", description="Service account PEM private key")
    sheet_id: str = Field(default="", description="Spreadsheet key")

    @field_validator("private_key")
    @classmethod
    def unescape_newlines(cls, v: str) -> str:
        # Keys pasted into env files carry literal "\n" sequences
        return v.replace("\\n", "\n")

    @property
    def is_complete(self) -> bool:
        return bool(self.service_account_email and self.private_key and self.sheet_id)


@lru_cache
def get_settings() -> KioskSettings:
    """Get cached kiosk settings instance."""
    settings = KioskSettings()
    logger.info(
        f"Kiosk settings loaded (backend={settings.persistence_backend}, "
        f"inactivity={settings.inactivity_timeout_seconds}s, "
        f"countdown={settings.thank_you_countdown_seconds}s)"
    )
    return settings


@lru_cache
def get_sheets_settings() -> GoogleSheetsSettings:
    """Get cached spreadsheet settings instance."""
    return GoogleSheetsSettings()
