"""
Console Test Harness for the Survey Kiosk

Simple console loop to drive the KioskController before involving a browser.
Uses the real timers, so the inactivity reset and thank-you countdown run in
the background while waiting for input.
"""

import logging
import sys

from survey_kiosk.commands import (
    AdvanceStep,
    GoBack,
    ResetSession,
    StartSurvey,
    SubmitSurvey,
    UpdateField,
)
from survey_kiosk.config import get_settings
from survey_kiosk.core.kiosk_controller import build_controller
from survey_kiosk.utils.display_helpers import format_console

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  start                 open the questionnaire
  set <field> <value>   edit a field (identity_number, demographic_category,
                        consulted_professional, has_coverage, consultation_frequency)
  next | back           move between steps
  submit                finish and save
  reset                 return to welcome
  state                 show current state
  quit                  exit"""


def print_separator(char="=", length=60):
    """Print a separator line"""
    print(char * length)


def parse_command(line):
    """
    Map one console line to a command.

    Returns:
        Command, or None for 'state' / unknown input
    """
    parts = line.strip().split(maxsplit=2)
    if not parts:
        return None

    verb = parts[0].lower()
    if verb == "start":
        return StartSurvey()
    if verb == "next":
        return AdvanceStep()
    if verb == "back":
        return GoBack()
    if verb == "submit":
        return SubmitSurvey()
    if verb == "reset":
        return ResetSession(reason="user")
    if verb == "set" and len(parts) == 3:
        return UpdateField(field=parts[1], value=parts[2])
    return None


def main():
    """Run console kiosk"""
    print_separator()
    print("SURVEY KIOSK - CONSOLE TEST")
    print_separator()
    print(HELP_TEXT)

    kiosk = build_controller()
    kiosk.start()

    try:
        while True:
            try:
                line = input("\n> ")
            except EOFError:
                break

            if line.strip().lower() in {"quit", "exit", "stop"}:
                break

            command = parse_command(line)
            if command is None:
                if line.strip().lower() != "state":
                    print(HELP_TEXT)
                print(format_console(kiosk.view()))
                continue

            result = kiosk.handle(command)
            marker = "" if result.accepted else " (ignored)"
            print(f"{result.command_type}{marker}: {format_console(result.view)}")
    finally:
        kiosk.shutdown()

    print("\nKiosk stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
