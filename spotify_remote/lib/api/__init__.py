"""
Spotify Web API modules
"""
from .spotify_api import SpotifyApiHelper

__all__ = ['SpotifyApiHelper']
