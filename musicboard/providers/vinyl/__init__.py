"""Vinyl marketplace providers."""

from musicboard.providers.vinyl.discogs_vinyl_provider import DiscogsVinylProvider

__all__ = ["DiscogsVinylProvider"]
