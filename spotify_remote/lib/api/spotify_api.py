"""
Spotify Web API helper
Search, playback control and device listing on top of a token-aware request dispatcher
"""
from typing import Any, Dict, List, Optional

import requests

from ...config import Config
from ..auth.spotify_oauth import SpotifyOAuthClient
from ..auth.token_manager import TokenManager
from ..errors import ApiError, AuthorizationError, NotFoundError, TransportError
from ..models import Device, TrackReference
from ..utils.logger import api_logger as logger

API_BASE_URL = "https://api.spotify.com/v1"
SEARCH_URL = f"{API_BASE_URL}/search"
PLAY_URL = f"{API_BASE_URL}/me/player/play"
PAUSE_URL = f"{API_BASE_URL}/me/player/pause"
DEVICES_URL = f"{API_BASE_URL}/me/player/devices"


class SpotifyApiHelper:
    """Spotify Web API helper for a single user"""

    def __init__(self, config: Config, token_manager: Optional[TokenManager] = None,
                 session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        if token_manager is None:
            token_manager = TokenManager(SpotifyOAuthClient(config, session=self.session),
                                         refresh_token=config.refresh_token)
        self.tokens = token_manager

    # =========================================================================
    # Token access
    # =========================================================================

    def get_access_token(self) -> str:
        return self.tokens.get_access_token()

    def refresh_access_token(self) -> str:
        return self.tokens.refresh_access_token()

    def set_implicit_token(self) -> str:
        return self.tokens.set_implicit_token()

    def set_refresh_token(self, refresh_token: str) -> None:
        self.tokens.set_refresh_token(refresh_token)

    # =========================================================================
    # Request dispatch
    # =========================================================================

    def send_api_request(self, method: str, url: str, params: Optional[Dict[str, Any]] = None,
                         data: Optional[Dict[str, Any]] = None, retry: bool = True) -> requests.Response:
        """
        Send an authenticated Web API request.

        A 401 refreshes the access token and resubmits the request once.
        Any remaining failure is raised; this never returns None.
        """
        token = self.tokens.get_access_token()
        headers = {
            'Authorization': f'Bearer {token}',
            'Content-Type': 'application/json',
        }

        logger.debug(f"{method.upper()} {url} params={params}")
        try:
            response = self.session.request(
                method.upper(),
                url,
                params=params,
                json=data,
                headers=headers,
                timeout=self.config.request_timeout
            )
        except requests.RequestException as e:
            logger.error(f"❌ Network error calling {url}: {str(e)}")
            raise TransportError(f"Network error calling {url}: {e}") from e

        if response.status_code == 401:
            if retry:
                logger.warning("Access token rejected (401); refreshing and retrying once")
                self.tokens.refresh_access_token(stale_token=token)
                return self.send_api_request(method, url, params, data, retry=False)
            logger.error(f"❌ {method.upper()} {url} still unauthorized after token refresh")
            raise AuthorizationError("Spotify rejected the refreshed access token",
                                     status_code=response.status_code, body=response.text)

        if response.status_code >= 400:
            logger.error(f"❌ {method.upper()} {url} failed: {response.status_code} - {response.text}")
            raise ApiError(f"Spotify API returned HTTP {response.status_code}",
                           status_code=response.status_code, body=response.text)

        return response

    @staticmethod
    def _json(response: requests.Response, url: str) -> Dict[str, Any]:
        """Decode a success body, mapping anything unusable to ApiError"""
        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"❌ {url} returned invalid JSON: {response.text}")
            raise ApiError(f"{url} returned invalid JSON", status_code=response.status_code,
                           body=response.text) from e

        if not isinstance(payload, dict):
            logger.error(f"❌ {url} returned an unexpected payload: {response.text}")
            raise ApiError(f"{url} returned an unexpected payload", status_code=response.status_code,
                           body=response.text)
        return payload

    # =========================================================================
    # Domain operations
    # =========================================================================

    def search(self, title: str, artist: Optional[str] = None) -> TrackReference:
        """Find the first track matching title (and artist, if given)"""
        query = f"{title} artist:{artist}" if artist else title
        params = {'q': query, 'type': 'track'}
        if self.config.market:
            params['market'] = self.config.market

        response = self.send_api_request('get', SEARCH_URL, params)
        payload = self._json(response, SEARCH_URL)
        tracks = payload.get('tracks') or {}
        items = (tracks.get('items') if isinstance(tracks, dict) else None) or []
        if not isinstance(items, list):
            logger.error(f"❌ Search returned an unexpected payload for query: {query}")
            raise ApiError("Search returned an unexpected payload", status_code=response.status_code,
                           body=response.text)
        if not items:
            logger.info(f"No tracks found for query: {query}")
            raise NotFoundError(f"No tracks found for '{query}'")

        first = items[0]
        if not isinstance(first, dict) or not first.get('uri'):
            logger.error(f"❌ Search returned a malformed track for query: {query}")
            raise ApiError("Search returned a track without a URI", status_code=response.status_code,
                           body=response.text)

        track = TrackReference.from_track_item(first)
        logger.info(f"Found track {track.internal_uri} for query: {query}")
        return track

    def play_track(self, title: str, artist: Optional[str] = None,
                   device_id: Optional[str] = None) -> TrackReference:
        track = self.search(title, artist)

        # Explicit device, then configured default, else the active device
        params = {}
        target = device_id or self.config.device_id
        if target:
            params['device_id'] = target

        self.send_api_request('put', PLAY_URL, params, {'uris': [track.internal_uri]})
        logger.info(f"▶ Playing {track.internal_uri}" + (f" on {target}" if target else ""))
        return track

    def resume_playback(self) -> None:
        """Resume playback on the currently active player"""
        self.send_api_request('put', PLAY_URL)

    def pause_playback(self) -> None:
        """Pause playback on the currently active player"""
        self.send_api_request('put', PAUSE_URL)

    def list_devices(self) -> List[Device]:
        response = self.send_api_request('get', DEVICES_URL)
        devices = self._json(response, DEVICES_URL).get('devices') or []
        if not isinstance(devices, list):
            logger.error(f"❌ {DEVICES_URL} returned an unexpected payload: {response.text}")
            raise ApiError(f"{DEVICES_URL} returned an unexpected payload", status_code=response.status_code,
                           body=response.text)
        return [Device.from_payload(d) for d in devices if isinstance(d, dict)]

    def get_devices(self) -> Dict[str, str]:
        """Map device name to id; a later device with the same name wins"""
        return {device.name: device.id for device in self.list_devices()}
