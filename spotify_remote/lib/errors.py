"""
Spotify error types

Every failure the API helper can detect is raised as one of these so callers
can tell "not found" from "transient failure" from "re-authorize".
"""
from typing import Optional


class SpotifyError(Exception):
    """Base class for Spotify integration failures"""


class TransportError(SpotifyError):
    """The request never produced an HTTP response (DNS, connection, timeout)"""


class _HttpStatusError(SpotifyError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TokenError(_HttpStatusError):
    """A token endpoint exchange failed"""


class ApiError(_HttpStatusError):
    """The Web API answered with a 4xx/5xx other than a recoverable 401"""


class AuthorizationError(_HttpStatusError):
    """The Web API still answered 401 after the token was refreshed"""


class NotFoundError(SpotifyError):
    """A search returned no results"""
