"""
Data shapes returned by the Spotify API helper
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str


@dataclass(frozen=True)
class Device:
    name: str
    id: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'Device':
        return cls(name=payload.get('name', ''), id=payload.get('id', ''))


@dataclass(frozen=True)
class TrackReference:
    """A playable track: Spotify URI for playback, open.spotify.com URL for sharing"""

    internal_uri: str
    external_url: str

    @classmethod
    def from_track_item(cls, item: Dict[str, Any]) -> 'TrackReference':
        return cls(
            internal_uri=item['uri'],
            external_url=item.get('external_urls', {}).get('spotify', ''),
        )
