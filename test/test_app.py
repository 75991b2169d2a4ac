#!/usr/bin/env python3
"""
Tests for the authorization redirect server
"""
from urllib.parse import urlparse, parse_qs

import pytest

from spotify_remote.app import ERROR_MESSAGE, create_app, main
from spotify_remote.config import Config

from conftest import FakeResponse, token_response


@pytest.fixture
def client(config, api):
    app = create_app(config, api=api)
    app.config['TESTING'] = True
    return app.test_client()


def _issue_state(client):
    response = client.get('/auth')
    assert response.status_code == 302
    location = response.headers['Location']
    return location, parse_qs(urlparse(location).query)['state'][0]


def test_auth_redirects_to_spotify(client):
    """/auth redirects to the Spotify authorize page with the client's parameters"""
    location, state = _issue_state(client)

    parsed = urlparse(location)
    assert parsed.netloc == 'accounts.spotify.com'
    assert parsed.path == '/authorize'
    query = parse_qs(parsed.query)
    assert query['response_type'] == ['code']
    assert query['client_id'] == ['client-id']
    assert query['redirect_uri'] == ['http://localhost:8888/callback']
    assert len(state) == 32


def test_auth_issues_fresh_state_each_time(client):
    """Every /auth visit issues a new state value"""
    _, first = _issue_state(client)
    _, second = _issue_state(client)
    assert first != second


def test_callback_without_state_redirects_with_error(client, session):
    """A callback without state is redirected with state_mismatch"""
    response = client.get('/callback?code=abc')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/#error=state_mismatch')
    assert session.token_calls == []


def test_callback_with_unknown_state_redirects_with_error(client, session):
    """A callback with a state the server never issued is rejected"""
    _issue_state(client)
    response = client.get('/callback?code=abc&state=forged')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/#error=state_mismatch')
    assert session.token_calls == []


def test_callback_prints_refresh_token(client, session, capsys):
    """A valid callback prints the refresh token and hands it to the helper"""
    _, state = _issue_state(client)
    session.token_responses.append(token_response('access-1', refresh_token='refresh-from-callback'))

    response = client.get(f'/callback?code=the-code&state={state}')

    assert response.status_code == 200
    assert response.get_data(as_text=True) == 'Check console output for token'
    assert 'refresh-from-callback' in capsys.readouterr().out
    assert client.application.extensions['spotify_api'].tokens.refresh_token == 'refresh-from-callback'
    assert session.token_calls[0]['data']['code'] == 'the-code'


def test_callback_state_cannot_be_reused(client, session):
    """An issued state is accepted only once"""
    _, state = _issue_state(client)
    session.token_responses.append(token_response('access-1', refresh_token='r'))
    client.get(f'/callback?code=one&state={state}')

    response = client.get(f'/callback?code=two&state={state}')
    assert response.status_code == 302
    assert len(session.token_calls) == 1


def test_callback_exchange_failure(client, session):
    """A failed code exchange renders the generic error message"""
    _, state = _issue_state(client)
    session.token_responses.append(FakeResponse(400, {'error': 'invalid_grant'}))

    response = client.get(f'/callback?code=bad&state={state}')

    assert response.status_code == 500
    assert response.get_data(as_text=True) == ERROR_MESSAGE


def test_callback_provider_error(client, session):
    """An error reported by Spotify skips the code exchange"""
    _, state = _issue_state(client)

    response = client.get(f'/callback?error=access_denied&state={state}')

    assert response.status_code == 400
    assert session.token_calls == []


def test_devices_prints_mapping(client, session, capsys):
    """/devices prints every device name and id"""
    session.token_responses.append(token_response('access-1'))
    session.api_responses.append(FakeResponse(200, {'devices': [
        {'name': 'Kitchen', 'id': 'A'},
        {'name': 'Phone', 'id': 'B'},
    ]}))

    response = client.get('/devices')

    assert response.get_data(as_text=True) == 'Check console output for devices'
    out = capsys.readouterr().out
    assert 'Kitchen: A' in out
    assert 'Phone: B' in out


def test_devices_none_found(client, session):
    """/devices reports when no devices are available"""
    session.token_responses.append(token_response('access-1'))
    session.api_responses.append(FakeResponse(200, {'devices': []}))

    assert client.get('/devices').get_data(as_text=True) == 'No devices found'


def test_devices_failure_reports_generic_error(client, session):
    """An API failure on /devices renders the generic error message"""
    session.token_responses.append(token_response('access-1'))
    session.api_responses.append(FakeResponse(502, {'error': 'bad gateway'}))

    response = client.get('/devices')
    assert response.status_code == 500
    assert response.get_data(as_text=True) == ERROR_MESSAGE


def test_main_rejects_invalid_config():
    """main() exits with 1 when configuration is invalid"""
    assert main(Config()) == 1


def test_main_starts_server(config, monkeypatch):
    """main() starts the Flask server on the configured port"""
    started = {}

    def fake_run(self, host=None, port=None, **kwargs):
        started['host'] = host
        started['port'] = port

    monkeypatch.setattr('flask.Flask.run', fake_run)

    assert main(config) == 0
    assert started == {'host': 'localhost', 'port': 8888}


def test_devices_with_unreadable_body_reports_generic_error(client, session):
    """An unreadable device list renders the generic error message"""
    session.token_responses.append(token_response('access-1'))
    session.api_responses.append(FakeResponse(200, None, text='<html>gateway</html>'))

    response = client.get('/devices')

    assert response.status_code == 500
    assert response.get_data(as_text=True) == ERROR_MESSAGE
