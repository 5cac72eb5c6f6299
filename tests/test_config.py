"""
Test kiosk settings validation
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from pydantic import ValidationError

from survey_kiosk.config import KioskSettings


def test_defaults():
    settings = KioskSettings()
    assert settings.inactivity_timeout_seconds > 0
    assert settings.thank_you_countdown_seconds >= 1


def test_log_level_normalized():
    assert KioskSettings(log_level=" debug ").log_level == "DEBUG"
    assert KioskSettings(log_level="warning").log_level == "WARNING"


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        KioskSettings(log_level="verbose")


def test_unknown_log_level_from_environment_rejected(monkeypatch):
    monkeypatch.setenv("KIOSK_LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        KioskSettings()


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        KioskSettings(persistence_backend="postgres")


def test_non_positive_timeout_rejected():
    with pytest.raises(ValidationError):
        KioskSettings(inactivity_timeout_seconds=0)
