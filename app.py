"""
Flask Web Application for the Survey Kiosk

Serves the kiosk page and a small JSON API. The page forwards every pointer,
touch and key event to /api/activity and re-renders from /api/state.
"""

from flask import Flask, render_template, request, jsonify
import logging

from survey_kiosk.commands import (
    AdvanceStep,
    GoBack,
    RegisterActivity,
    ResetSession,
    StartSurvey,
    SubmitSurvey,
    UpdateField,
)
from survey_kiosk.config import get_settings
from survey_kiosk.core.kiosk_controller import build_controller
from survey_kiosk.utils.display_helpers import format_state

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Single kiosk per process
kiosk = None


def get_kiosk():
    """Build and start the kiosk controller on first use"""
    global kiosk

    if kiosk is None:
        kiosk = build_controller()
        kiosk.start()
        logger.info("Kiosk controller initialized")
    return kiosk


def _command_response(command):
    result = get_kiosk().handle(command)
    if not result.accepted:
        logger.info(f"{result.command_type} ignored on screen '{result.view.screen.value}'")
    return jsonify({
        'success': True,
        'accepted': result.accepted,
        'state': format_state(result.view)
    })


def _error_response(action, e):
    logger.error(f"Error handling {action}: {e}")
    return jsonify({
        'success': False,
        'error': str(e)
    }), 500


@app.route('/')
def index():
    """Kiosk page"""
    settings = get_settings()
    return render_template(
        'index.html',
        countdown=settings.thank_you_countdown_seconds,
    )


@app.route('/api/state', methods=['GET'])
def get_state():
    """Current session projection"""
    try:
        return jsonify({
            'success': True,
            'state': format_state(get_kiosk().view())
        })
    except Exception as e:
        return _error_response('state', e)


@app.route('/api/start', methods=['POST'])
def start_survey():
    """Leave the welcome screen"""
    try:
        return _command_response(StartSurvey())
    except Exception as e:
        return _error_response('start', e)


@app.route('/api/field', methods=['POST'])
def update_field():
    """Edit one questionnaire field"""
    try:
        data = request.get_json(silent=True) or {}
        field = data.get('field')

        if not field:
            return jsonify({
                'success': False,
                'error': 'Missing field name'
            }), 400

        return _command_response(UpdateField(field=field, value=str(data.get('value') or '')))
    except Exception as e:
        return _error_response('field update', e)


@app.route('/api/next', methods=['POST'])
def advance_step():
    """Validate step 1 and continue"""
    try:
        return _command_response(AdvanceStep())
    except Exception as e:
        return _error_response('next', e)


@app.route('/api/back', methods=['POST'])
def go_back():
    """Return to step 1"""
    try:
        return _command_response(GoBack())
    except Exception as e:
        return _error_response('back', e)


@app.route('/api/submit', methods=['POST'])
def submit_survey():
    """Validate step 2, show thank-you, save in the background"""
    try:
        return _command_response(SubmitSurvey())
    except Exception as e:
        return _error_response('submit', e)


@app.route('/api/reset', methods=['POST'])
def reset_session():
    """Return to the welcome screen"""
    try:
        data = request.get_json(silent=True) or {}
        return _command_response(ResetSession(reason=data.get('reason', 'user')))
    except Exception as e:
        return _error_response('reset', e)


@app.route('/api/activity', methods=['POST'])
def register_activity():
    """Raw input event from the page (re-arms the inactivity watchdog)"""
    try:
        data = request.get_json(silent=True) or {}
        return _command_response(RegisterActivity(event_type=str(data.get('event', ''))))
    except Exception as e:
        return _error_response('activity', e)


if __name__ == '__main__':
    get_kiosk()

    print("\n" + "="*60)
    print("SURVEY KIOSK - WEB INTERFACE")
    print("="*60)
    print("\nServer starting...")
    print("Open the kiosk browser at: http://localhost:5000")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    try:
        app.run(host='0.0.0.0', port=5000, debug=False, threaded=True)
    finally:
        kiosk.shutdown()
