"""
Spotify OAuth 2.0 Client
Handles the token endpoint (authorization code, refresh token and client
credentials grants) without external OAuth libraries
"""
import base64
from typing import Dict, Any, Optional, Tuple
from urllib.parse import urlencode

import requests

from ...config import Config
from ..errors import TokenError, TransportError
from ..models import Credentials
from ..utils.logger import auth_logger as logger

AUTHORIZATION_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"


def encode_basic_credentials(client_id: str, client_secret: str) -> str:
    """Return base64(client_id:client_secret) for an HTTP Basic header"""
    return base64.b64encode(f"{client_id}:{client_secret}".encode('utf-8')).decode('ascii')


def decode_basic_credentials(encoded: str) -> Tuple[str, str]:
    """Inverse of encode_basic_credentials; splits on the first ':' only"""
    decoded = base64.b64decode(encoded.encode('ascii')).decode('utf-8')
    client_id, _, client_secret = decoded.partition(':')
    return client_id, client_secret


class SpotifyOAuthClient:
    """Spotify OAuth 2.0 client implementation"""

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        """Initialize Spotify OAuth client with credentials from config"""
        if not config.client_id or not config.client_secret:
            raise ValueError("Spotify OAuth credentials not configured. Set CLIENT_ID and CLIENT_SECRET in .env")
        self.credentials = Credentials(config.client_id, config.client_secret)
        self.redirect_uri = config.resolved_redirect_uri
        self.scope = config.scope
        self.timeout = config.request_timeout
        self.session = session or requests.Session()

    def basic_auth_header(self) -> str:
        return 'Basic ' + encode_basic_credentials(self.credentials.client_id, self.credentials.client_secret)

    def get_authorization_url(self, state: str) -> str:
        params = {
            'response_type': 'code',
            'client_id': self.credentials.client_id,
            'scope': self.scope,
            'redirect_uri': self.redirect_uri,
            'state': state,
        }
        url = f"{AUTHORIZATION_URL}?{urlencode(params)}"
        logger.info(f"Generated Spotify OAuth URL with state: {state}")
        return url

    def exchange_code_for_tokens(self, code: str) -> Dict[str, Any]:
        """Exchange an authorization code for access and refresh tokens"""
        logger.info("Exchanging authorization code for access and refresh tokens")
        tokens = self._post_token({
            'code': code,
            'redirect_uri': self.redirect_uri,
            'grant_type': 'authorization_code',
        }, action="Token exchange")
        if 'refresh_token' not in tokens:
            logger.error("❌ Invalid token response: missing refresh_token")
            raise TokenError("Invalid token response: missing refresh_token", status_code=200)
        logger.info("✅ Successfully obtained refresh token from Spotify")
        return tokens

    def refresh_access_token(self, refresh_token: str) -> Dict[str, Any]:
        logger.info("Refreshing access token...")
        tokens = self._post_token({
            'grant_type': 'refresh_token',
            'refresh_token': refresh_token,
        }, action="Token refresh")
        logger.info("✅ Successfully refreshed access token from Spotify")
        return tokens

    def request_client_credentials_token(self) -> Dict[str, Any]:
        """Application-scoped token; no user permissions"""
        logger.info("Requesting client credentials token")
        tokens = self._post_token({'grant_type': 'client_credentials'}, action="Client credentials grant")
        logger.info("✅ Successfully obtained client credentials token from Spotify")
        return tokens

    def _post_token(self, data: Dict[str, str], action: str) -> Dict[str, Any]:
        try:
            response = self.session.post(
                TOKEN_URL,
                data=data,
                headers={
                    'Authorization': self.basic_auth_header(),
                    'Content-Type': 'application/x-www-form-urlencoded',
                },
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error(f"❌ {action} failed: {e.response.status_code} - {e.response.text}")
            raise TokenError(f"{action} failed with HTTP {e.response.status_code}",
                             status_code=e.response.status_code, body=e.response.text) from e
        except requests.RequestException as e:
            logger.error(f"❌ Network error during {action.lower()}: {str(e)}")
            raise TransportError(f"Network error during {action.lower()}: {e}") from e

        try:
            tokens = response.json()
        except ValueError as e:
            logger.error(f"❌ Invalid token response: {str(e)}")
            raise TokenError(f"{action} returned invalid JSON", status_code=response.status_code,
                             body=response.text) from e

        if not isinstance(tokens, dict) or 'access_token' not in tokens:
            logger.error("❌ Invalid token response: missing access_token")
            raise TokenError("Invalid token response: missing access_token",
                             status_code=response.status_code, body=response.text)
        return tokens
