"""
Test console harness command parsing
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import parse_command
from survey_kiosk.commands import AdvanceStep, GoBack, ResetSession, StartSurvey, SubmitSurvey, UpdateField


def test_simple_verbs():
    assert parse_command("start") == StartSurvey()
    assert parse_command("NEXT") == AdvanceStep()
    assert parse_command("back") == GoBack()
    assert parse_command("submit") == SubmitSurvey()
    assert parse_command("reset") == ResetSession(reason="user")


def test_set_keeps_value_whitespace():
    assert parse_command("set identity_number 123.456 789-01") == UpdateField(
        field="identity_number", value="123.456 789-01"
    )


def test_unknown_or_incomplete_input():
    assert parse_command("") is None
    assert parse_command("state") is None
    assert parse_command("set has_coverage") is None
    assert parse_command("jump") is None
