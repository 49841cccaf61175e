"""Vinyl marketplace DTOs returned by the Discogs adapter."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VinylRelease(BaseModel):
    """A single vinyl pressing from a Discogs database search.

    ``format`` and ``label`` are the upstream lists joined with ``", "``.
    ``confidence`` is how closely the Discogs title matches the
    ``"artist album"`` query (0.0-1.0).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    year: str | None = None
    country: str | None = None
    format: str = "Vinyl"
    label: str = "Unknown Label"
    cover_image: str | None = None
    uri: str | None = None
    resource_url: str | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class VinylSearchResult(BaseModel):
    """The vinyl search response body."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    results: list[VinylRelease] = Field(default_factory=list)
    total_results: int = 0
