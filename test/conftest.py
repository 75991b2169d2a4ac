"""
Shared fixtures: a fake requests session that replays canned responses
"""
import pytest
import requests

from spotify_remote.config import Config
from spotify_remote.lib.api import SpotifyApiHelper


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ('' if payload is None else str(payload))

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Stands in for requests.Session; token and API calls have separate queues"""

    def __init__(self):
        self.token_responses = []
        self.api_responses = []
        self.token_calls = []
        self.api_calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.token_calls.append({'url': url, 'data': data, 'headers': headers, 'timeout': timeout})
        return self._next(self.token_responses)

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.api_calls.append({
            'method': method, 'url': url, 'params': params, 'json': json,
            'headers': headers, 'timeout': timeout,
        })
        return self._next(self.api_responses)

    @staticmethod
    def _next(queue):
        assert queue, "unexpected request: no canned response left"
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def token_response(access_token, **extra):
    payload = {'access_token': access_token, 'token_type': 'Bearer', 'expires_in': 3600}
    payload.update(extra)
    return FakeResponse(200, payload)


@pytest.fixture
def config():
    return Config(
        client_id='client-id',
        client_secret='client-secret',
        redirect_uri='http://localhost:{PORT}/callback',
        port=8888,
        refresh_token='refresh-123',
    )


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def api(config, session):
    return SpotifyApiHelper(config, session=session)
