"""List models: narrative collections with free-text entries.

Unlike boards, list entries are typed by hand (album title, artist,
genre, an emoji cover) rather than picked from the catalog, and a list
carries a longer ``story`` alongside its description.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

LIST_GENRES = (
    "Avant-Jazz", "Avant-Folk", "Avant-Prog", "Avant-Metal", "Avant-Rock",
    "Hip Hop", "R&B", "Indie", "Electronic", "Rock", "Jazz", "Classical",
)
DEFAULT_LIST_GENRE = "Avant-Jazz"
DEFAULT_COVER = "🎵"


class ListItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    list_id: int | None = None
    album_title: str
    artist: str
    genre: str = DEFAULT_LIST_GENRE
    emoji: str = DEFAULT_COVER
    position: int = Field(default=0, ge=0)


class MusicList(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    owner_id: str
    title: str
    description: str = ""
    story: str | None = None
    genre: str = DEFAULT_LIST_GENRE
    is_public: bool = True
    likes_count: int = Field(default=0, ge=0)
    created_at: str | None = None
    items: list[ListItem] = Field(default_factory=list)


class ListLikeState(BaseModel):
    """Result of toggling a like on a list."""

    model_config = ConfigDict(frozen=True)

    list_id: int
    liked: bool
    likes_count: int = Field(ge=0)
