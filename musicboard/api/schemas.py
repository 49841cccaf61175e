"""Pydantic request/response schemas for the Musicboard API.

Defines the public contract for the store endpoints -- ratings, reviews,
boards, lists, profiles and health -- plus the body of the ``music-chat``
function.  The other function endpoints keep the loose ``{action, ...}``
bodies the pages already send and are validated by their adapters.

# ─── SCHEMA CONVENTIONS ───────────────────────────────────────────────
#
# Request schemas end with "Request", response schemas end with
# "Response".  Stored rows (Board, Review, MusicList, ...) are returned
# as their domain models from musicboard.models; a Response schema only
# exists where the wire shape differs from the model.
#
# Ratings and review text are unconstrained here.  The service layer
# rejects bad values with a 400 {error, detail} body in the page's own
# wording; FastAPI's 422 covers only malformed JSON shapes.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from musicboard.models.boards import BoardType
from musicboard.models.chat import ChatMessage
from musicboard.models.ratings import RatingSummary, TargetType, TrackRatingStats


class RateRequest(BaseModel):
    """A star rating for an album or track, with display metadata."""

    rating: float | None = None
    album_id: str | None = Field(default=None, description="Parent album; required for track ratings")
    album_name: str | None = None
    artist_name: str | None = None
    image_url: str | None = None


class RatingSummaryResponse(BaseModel):
    """Aggregate statistics for one album or track."""

    target_id: str | None = None
    count: int
    average: float
    display_average: str = Field(description='Average to one decimal, "0.0" when unrated')
    distribution: list[int]
    user_rating: float = 0.0

    @classmethod
    def from_summary(cls, summary: RatingSummary) -> RatingSummaryResponse:
        return cls(
            target_id=summary.target_id,
            count=summary.count,
            average=summary.average,
            display_average=summary.display_average,
            distribution=list(summary.distribution),
            user_rating=summary.user_rating,
        )


class ListenLaterRequest(BaseModel):
    """Display metadata saved alongside a queued album."""

    album_name: str | None = None
    artist_name: str | None = None
    image_url: str | None = None


class TrackRatingsResponse(BaseModel):
    """Per-track statistics for every rated track on an album."""

    album_id: str
    tracks: dict[str, TrackRatingStats] = Field(default_factory=dict)


class ReviewRequest(BaseModel):
    rating: float | None = None
    review_text: str | None = None
    target_type: TargetType = TargetType.ALBUM


class CreateBoardRequest(BaseModel):
    title: str = ""
    board_type: BoardType | str = BoardType.MIXED
    description: str | None = None
    is_public: bool = True


class AddBoardItemRequest(BaseModel):
    """A catalog item picked from search results."""

    title: str = ""
    external_id: str = Field(default="", description="Upstream id, e.g. a Spotify album id")
    artist: str | None = None
    image_url: str | None = None


class ListItemInput(BaseModel):
    """One hand-typed entry of a list being published."""

    album_title: str = ""
    artist: str = ""
    genre: str = ""
    emoji: str = ""


class CreateListRequest(BaseModel):
    title: str = ""
    description: str = ""
    story: str | None = None
    genre: str | None = None
    is_public: bool = True
    items: list[ListItemInput] = Field(default_factory=list)


class ProfileUpdateRequest(BaseModel):
    """Profile fields the signed-in user may change."""

    username: str = Field(min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.]+$")
    display_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = None
    bio: str | None = Field(default=None, max_length=500)


class ChatRequest(BaseModel):
    """Body of the ``music-chat`` function: the conversation so far."""

    messages: list[ChatMessage] = Field(min_length=1)


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    upstreams: dict[str, bool]
    llm_provider: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
