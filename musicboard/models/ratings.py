"""Rating and review models.

Ratings are half-star values on a five-star scale (0.5, 1.0, ... 5.0),
one per ``(user_id, target_id)``; re-rating overwrites the earlier row.
Aggregates (:class:`RatingSummary`, :class:`TrackRatingStats`) are never
stored; the aggregator recomputes them from the rows on every read.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

RATING_MIN = 0.5
RATING_MAX = 5.0
RATING_STEP = 0.5
DISTRIBUTION_BUCKETS = 10

REVIEW_MIN_LENGTH = 10
REVIEW_MAX_LENGTH = 5000


class TargetType(str, Enum):  # noqa: UP042
    """What a rating or review is attached to."""

    ALBUM = "album"
    TRACK = "track"


class Rating(BaseModel):
    """A stored rating row.

    ``rating`` is deliberately unconstrained here: the write path rejects
    off-scale values, but rows read back from the store are reported as
    they are so the aggregator can decide what to do with them.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    target_id: str
    target_type: TargetType
    rating: float
    album_id: str | None = None     # Parent album, set on track ratings only
    album_name: str | None = None
    artist_name: str | None = None
    image_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class Review(BaseModel):
    """A written review; one per user per target, edited in place."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    user_id: str
    target_id: str
    target_type: TargetType = TargetType.ALBUM
    rating: float
    review_text: str
    created_at: str | None = None
    updated_at: str | None = None


class RatingSummary(BaseModel):
    """Aggregate statistics for one target, recomputed on every fetch."""

    model_config = ConfigDict(frozen=True)

    target_id: str | None = None
    count: int = Field(default=0, ge=0)
    average: float = 0.0
    # Bucket i counts ratings equal to (i + 1) * 0.5.
    distribution: list[int] = Field(default_factory=lambda: [0] * DISTRIBUTION_BUCKETS)
    user_rating: float = 0.0

    @property
    def display_average(self) -> str:
        """The average rounded to one decimal, ``"0.0"`` when unrated."""
        return f"{self.average:.1f}"


class TrackRatingStats(BaseModel):
    """Running statistics for one track on an album page."""

    model_config = ConfigDict(frozen=True)

    track_id: str
    count: int = Field(default=0, ge=0)
    average: float = 0.0


class AlbumRater(BaseModel):
    """One rater on an album page: the rating plus the rater's public profile.

    The profile fields are ``None`` for users who never set up a profile.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    rating: float
    rated_at: str | None = None
    username: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
