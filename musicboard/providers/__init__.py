"""Concrete providers.

Upstream adapters (one per third-party API):
    catalog/   -- TheAudioDB, Spotify
    events/    -- Bandsintown
    vinyl/     -- Discogs
    lyrics/    -- Genius
    llm/       -- OpenAI-compatible gateway, Anthropic

Local backends:
    cache/     -- in-memory token cache
    ratings/, boards/, lists/, profiles/ -- SQLite stores
"""
