"""
Spotify remote: OAuth redirect server and a playback helper for the Spotify Web API
"""
__version__ = '1.0.0'
