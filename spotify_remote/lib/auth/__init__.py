"""
Authentication modules
"""
from .spotify_oauth import SpotifyOAuthClient, encode_basic_credentials, decode_basic_credentials
from .token_manager import TokenManager

__all__ = ['SpotifyOAuthClient', 'TokenManager', 'encode_basic_credentials', 'decode_basic_credentials']
