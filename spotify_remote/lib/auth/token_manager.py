"""
Access token lifecycle for the Spotify API helper.

One bearer token is cached per manager. It is fetched lazily on first use,
replaced wholesale whenever a refresh succeeds and left untouched when a
refresh fails. Expiry is not tracked; callers refresh after a 401.
"""
import threading
from typing import Optional

from ...config import ConfigError
from ..utils.logger import auth_logger as logger
from .spotify_oauth import SpotifyOAuthClient


class TokenManager:
    """Holds the current access token and knows how to obtain a new one"""

    def __init__(self, oauth_client: SpotifyOAuthClient, refresh_token: Optional[str] = None,
                 token: Optional[str] = None):
        self.oauth = oauth_client
        self._refresh_token = refresh_token
        self._token = token
        # Guards both tokens; concurrent refreshes coalesce into one exchange
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    def set_refresh_token(self, refresh_token: str) -> None:
        """Use a refresh token obtained after startup (e.g. from /callback)"""
        with self._lock:
            self._refresh_token = refresh_token

    def get_access_token(self) -> str:
        """Return the cached token, fetching one via the refresh token if absent"""
        with self._lock:
            if self._token is None:
                self._refresh_locked()
            return self._token

    def refresh_access_token(self, stale_token: Optional[str] = None) -> str:
        """
        Exchange the refresh token for a new access token.

        When ``stale_token`` is given and another caller already replaced it,
        the current token is returned without a second exchange.
        """
        with self._lock:
            if stale_token is not None and self._token is not None and self._token != stale_token:
                logger.debug("Access token already refreshed by another request")
                return self._token
            self._refresh_locked()
            return self._token

    def set_implicit_token(self) -> str:
        """Replace the cached token with an application-scoped client credentials token"""
        with self._lock:
            tokens = self.oauth.request_client_credentials_token()
            self._token = tokens['access_token']
            return self._token

    def _refresh_locked(self) -> None:
        if not self._refresh_token:
            logger.error("❌ No refresh token configured; open /auth to obtain one")
            raise ConfigError(["REFRESH_TOKEN is required for user-scoped requests"])

        tokens = self.oauth.refresh_access_token(self._refresh_token)
        self._token = tokens['access_token']

        rotated = tokens.get('refresh_token')
        if rotated and rotated != self._refresh_token:
            self._refresh_token = rotated
            logger.warning("⚠️  Spotify issued a new refresh token; update REFRESH_TOKEN in your environment")
