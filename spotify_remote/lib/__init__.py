"""
Library modules
"""
from .api import SpotifyApiHelper
from .errors import (
    ApiError,
    AuthorizationError,
    NotFoundError,
    SpotifyError,
    TokenError,
    TransportError,
)
from .models import Credentials, Device, TrackReference

__all__ = [
    'SpotifyApiHelper',
    'ApiError',
    'AuthorizationError',
    'NotFoundError',
    'SpotifyError',
    'TokenError',
    'TransportError',
    'Credentials',
    'Device',
    'TrackReference',
]
