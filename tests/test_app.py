"""
Test the Flask kiosk API

Each test swaps in a controller driven by the manual scheduler and the
deferred dispatcher so timers and saves only move when the test says so.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

import app as app_module
from survey_kiosk.core.kiosk_controller import KioskController
from survey_kiosk.core.scheduling import DeferredDispatcher, ManualScheduler
from survey_kiosk.results import SaveResult


class StubGateway:
    def __init__(self, result=None):
        self.result = result or SaveResult.ok()
        self.saved = []

    def append(self, answers):
        self.saved.append(answers)
        return self.result


@pytest.fixture
def kiosk():
    scheduler = ManualScheduler()
    dispatcher = DeferredDispatcher()
    gateway = StubGateway()
    controller = KioskController(gateway, scheduler=scheduler, dispatcher=dispatcher, inactivity_timeout=60)
    controller.start()
    app_module.kiosk = controller

    yield controller, scheduler, dispatcher, gateway

    controller.shutdown()
    app_module.kiosk = None


@pytest.fixture
def client(kiosk):
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as c:
        yield c


def set_field(client, field, value):
    return client.post('/api/field', json={'field': field, 'value': value})


def fill_step_one(client):
    set_field(client, 'identity_number', '123.456.789-01')
    set_field(client, 'demographic_category', 'feminino')


def fill_step_two(client):
    set_field(client, 'consulted_professional', 'dra-santos')
    set_field(client, 'has_coverage', 'sim')
    set_field(client, 'consultation_frequency', 'trimestral')


# ========================
# Page and state
# ========================

def test_index_renders(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'welcome' in response.data


def test_initial_state(client):
    data = client.get('/api/state').get_json()
    assert data['success']
    assert data['state']['screen'] == 'welcome'
    assert data['state']['countdown'] is None
    assert data['state']['options']['has_coverage'][1] == {'value': 'nao', 'label': 'Não'}


# ========================
# Commands
# ========================

def test_start_and_fill_form(client):
    data = client.post('/api/start').get_json()
    assert data['accepted']
    assert data['state']['screen'] == 'form'
    assert data['state']['form_step'] == 1

    data = set_field(client, 'identity_number', '123.456.789-01').get_json()
    assert data['state']['answers']['identity_number'] == '12345678901'


def test_next_with_missing_fields_shows_errors(client):
    client.post('/api/start')
    data = client.post('/api/next').get_json()

    assert not data['accepted']
    assert data['state']['form_step'] == 1
    assert data['state']['errors']['identity_number'] == 'CPF é obrigatório'
    assert 'demographic_category' in data['state']['errors']


def test_field_requires_name(client):
    client.post('/api/start')
    response = client.post('/api/field', json={'value': 'x'})
    assert response.status_code == 400
    assert not response.get_json()['success']


def test_submit_then_save_success(client, kiosk):
    controller, scheduler, dispatcher, gateway = kiosk
    client.post('/api/start')
    fill_step_one(client)
    client.post('/api/next')
    fill_step_two(client)

    data = client.post('/api/submit').get_json()
    assert data['state']['screen'] == 'thank-you'
    assert data['state']['save_status'] == 'saving'
    assert data['state']['countdown'] == 15
    assert data['state']['thank_you']['tone'] == 'pending'

    dispatcher.run_pending()
    scheduler.advance(3)
    state = client.get('/api/state').get_json()['state']
    assert state['save_status'] == 'success'
    assert state['countdown'] == 12
    assert gateway.saved[0].consulted_professional == 'dra-santos'


def test_back_keeps_answers(client):
    client.post('/api/start')
    fill_step_one(client)
    client.post('/api/next')
    set_field(client, 'has_coverage', 'nao')

    data = client.post('/api/back').get_json()
    assert data['state']['form_step'] == 1
    assert data['state']['answers']['has_coverage'] == 'nao'


def test_reset_returns_to_welcome(client):
    client.post('/api/start')
    fill_step_one(client)

    data = client.post('/api/reset', json={'reason': 'user'}).get_json()
    assert data['accepted']
    assert data['state']['screen'] == 'welcome'
    assert data['state']['answers']['identity_number'] == ''


def test_activity_keeps_session_alive(client, kiosk):
    _, scheduler, _, _ = kiosk
    client.post('/api/start')

    scheduler.advance(45)
    data = client.post('/api/activity', json={'event': 'touchstart'}).get_json()
    assert data['accepted']
    scheduler.advance(45)
    assert client.get('/api/state').get_json()['state']['screen'] == 'form'

    data = client.post('/api/activity', json={'event': 'scroll'}).get_json()
    assert not data['accepted']
    scheduler.advance(20)
    assert client.get('/api/state').get_json()['state']['screen'] == 'welcome'


def test_controller_failure_is_500(client, kiosk, monkeypatch):
    controller = kiosk[0]

    def broken(command):
        raise RuntimeError("lock poisoned")

    monkeypatch.setattr(controller, 'handle', broken)
    response = client.post('/api/start')
    assert response.status_code == 500
    assert response.get_json()['error'] == 'lock poisoned'
