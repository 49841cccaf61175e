"""Listen Later queue models: albums a user saved to hear later."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ListenLaterEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    user_id: str
    album_id: str
    album_name: str | None = None
    artist_name: str | None = None
    image_url: str | None = None
    created_at: str | None = None


class ListenLaterResult(BaseModel):
    """Outcome of saving an album; ``added`` is false when it was already queued."""

    model_config = ConfigDict(frozen=True)

    added: bool
    message: str
    entry: ListenLaterEntry
