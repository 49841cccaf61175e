"""Catalog DTOs returned by the Spotify adapter.

Spotify payloads are large and loosely shaped; the adapter reshapes them
into these frozen models so that a missing upstream field becomes an
explicit ``None``/``[]`` rather than silently disappearing.  The page
code expects camelCase keys (``releaseDate``, ``spotifyUrl``), so the
summary models serialise through a camelCase alias generator.  Track
rows inside :class:`AlbumDetail` keep Spotify's own snake_case keys
(``duration_ms``, ``track_number``) because the pages read them verbatim.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class AlbumSummary(BaseModel):
    """An album row in search results or new releases."""

    model_config = _CAMEL

    id: str
    name: str
    artist: str | None = None
    image: str | None = None
    release_date: str | None = None
    type: Literal["album"] = "album"


class TrackSummary(BaseModel):
    """A track row in search results (image and date come from its album)."""

    model_config = _CAMEL

    id: str
    name: str
    artist: str | None = None
    image: str | None = None
    release_date: str | None = None
    type: Literal["track"] = "track"


class ArtistSummary(BaseModel):
    """An artist row in search results."""

    model_config = _CAMEL

    id: str
    name: str
    image: str | None = None
    type: Literal["artist"] = "artist"


class CatalogSearchResults(BaseModel):
    """The three result groups of a catalog search; each may be empty."""

    model_config = _CAMEL

    albums: list[AlbumSummary] = Field(default_factory=list)
    tracks: list[TrackSummary] = Field(default_factory=list)
    artists: list[ArtistSummary] = Field(default_factory=list)


class AlbumTrack(BaseModel):
    """A track inside an album detail response."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    duration_ms: int = 0
    track_number: int = 0
    artists: list[str] = Field(default_factory=list)
    explicit: bool = False


class AlbumDetail(BaseModel):
    """Full album detail with derived fields.

    ``duration`` is the sum of the tracks' ``duration_ms`` and
    ``available_markets`` is the number of markets, not the list.
    """

    model_config = _CAMEL

    id: str
    name: str
    artist: str = "Unknown Artist"
    artists: list[dict[str, Any]] = Field(default_factory=list)
    image: str = ""
    release_date: str | None = None
    total_tracks: int = 0
    duration: int = 0
    label: str | None = None
    type: str | None = None
    spotify_url: str | None = None
    popularity: int | None = None
    genres: list[str] = Field(default_factory=list)
    copyrights: list[dict[str, Any]] = Field(default_factory=list)
    available_markets: int = 0
    tracks: list[AlbumTrack] = Field(default_factory=list)

    def formatted_duration(self) -> str:
        """Return the total running time as ``"M minutes S seconds"``."""
        minutes, remainder = divmod(self.duration, 60000)
        return f"{minutes} minutes {remainder // 1000} seconds"
