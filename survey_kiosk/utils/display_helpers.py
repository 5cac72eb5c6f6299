"""
Display Helpers - Convert session state to visitor-facing copy

Used by the web host to render the thank-you screen. The reward is handed out
regardless of the save outcome; only the tone and wording change.
"""

from typing import Any, Dict

from survey_kiosk.contracts import SaveStatus, Screen
from survey_kiosk.results import SessionView
from survey_kiosk.utils.field_mappings import options_catalog

# save status -> thank-you screen copy
THANK_YOU_COPY = {
    SaveStatus.SAVING: {
        'tone': 'pending',
        'title': 'OBRIGADO!',
        'reward': 'Retire seu brinde na recepção!',
        'message': 'Salvando suas respostas...',
    },
    SaveStatus.SUCCESS: {
        'tone': 'success',
        'title': 'OBRIGADO!',
        'reward': 'Retire seu brinde na recepção!',
        'message': 'Suas respostas foram salvas com sucesso. Obrigado!',
    },
    SaveStatus.ERROR: {
        'tone': 'error',
        'title': 'ATENÇÃO!',
        'reward': 'Houve um erro, mas retire seu brinde!',
        'message': 'Não foi possível salvar suas respostas, mas agradecemos sua participação.',
    },
}


def thank_you_copy(save_status: SaveStatus) -> Dict[str, str]:
    """Copy for the thank-you screen; idle falls back to the success wording"""
    return dict(THANK_YOU_COPY.get(save_status, THANK_YOU_COPY[SaveStatus.SUCCESS]))


def format_state(view: SessionView) -> Dict[str, Any]:
    """
    Build the JSON payload the kiosk page renders from.

    Returns:
        dict: Session projection plus thank-you copy and option catalogs
    """
    payload = view.to_dict()
    payload['thank_you'] = thank_you_copy(view.save_status)
    payload['options'] = options_catalog()
    return payload


def format_console(view: SessionView) -> str:
    """One-line summary of the session for the console harness"""
    parts = [f"screen={view.screen.value}"]
    if view.screen is Screen.FORM:
        parts.append(f"step={int(view.form_step)}")
    if view.countdown is not None:
        parts.append(f"countdown={view.countdown}")
    parts.append(f"save={view.save_status.value}")
    if view.errors:
        parts.append("errors=" + "; ".join(f"{k}: {v}" for k, v in view.errors.items()))
    return " | ".join(parts)
