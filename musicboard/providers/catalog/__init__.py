"""Catalog providers: TheAudioDB (artist/album browsing) and Spotify (search, new releases, album detail)."""

from musicboard.providers.catalog.audiodb_provider import AudioDBProvider
from musicboard.providers.catalog.spotify_provider import SpotifyProvider

__all__ = ["AudioDBProvider", "SpotifyProvider"]
