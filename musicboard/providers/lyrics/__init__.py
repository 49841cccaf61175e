"""Lyrics providers."""

from musicboard.providers.lyrics.genius_provider import GeniusProvider

__all__ = ["GeniusProvider"]
