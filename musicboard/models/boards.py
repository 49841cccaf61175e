"""Board models: user-curated, ordered collections of catalog items.

A board owns an ordered sequence of :class:`BoardItem` rows (``position``
starts at 0 and has no gaps).  ``likes_count`` is a denormalised counter
kept in step with the ``board_likes`` rows by the store, which updates
both inside one transaction.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

BOARD_TITLE_MAX_LENGTH = 100
BOARD_DESCRIPTION_MAX_LENGTH = 2000


class BoardType(str, Enum):  # noqa: UP042
    """What kind of items a board collects."""

    ALBUM = "album"
    ARTIST = "artist"
    VINYL = "vinyl"
    CONCERT = "concert"
    MIXED = "mixed"


class BoardSort(str, Enum):  # noqa: UP042
    """Feed orderings for public boards."""

    RECENT = "recent"
    POPULAR = "popular"


class BoardItem(BaseModel):
    """One entry on a board."""

    model_config = ConfigDict(frozen=True)

    id: int
    board_id: int
    title: str
    artist: str | None = None
    image_url: str | None = None
    external_id: str
    position: int = Field(ge=0)


class Board(BaseModel):
    """A board row without its items."""

    model_config = ConfigDict(frozen=True)

    id: int
    owner_id: str
    title: str
    board_type: BoardType
    description: str | None = None
    is_public: bool = True
    likes_count: int = Field(default=0, ge=0)
    created_at: str | None = None


class BoardDetail(BaseModel):
    """A board with its ordered items and the viewer's like state."""

    model_config = ConfigDict(frozen=True)

    board: Board
    items: list[BoardItem] = Field(default_factory=list)
    is_liked: bool = False


class LikeState(BaseModel):
    """Result of toggling a like."""

    model_config = ConfigDict(frozen=True)

    board_id: int
    liked: bool
    likes_count: int = Field(ge=0)
