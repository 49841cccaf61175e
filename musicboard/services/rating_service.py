"""Rating and review use cases.

Every write is validated here before the store is touched: a rating must
be a half-star value between 0.5 and 5.0, and a review must carry a
rating and 10 to 5000 characters of text.  After a rating is saved the
caller gets the freshly recomputed summary for the target, the same view
the album page renders.
"""

from __future__ import annotations

import math

import structlog

from musicboard.interfaces.profile_provider import IProfileProvider
from musicboard.interfaces.rating_provider import IRatingProvider
from musicboard.models.ratings import (
    RATING_MAX,
    RATING_MIN,
    RATING_STEP,
    REVIEW_MAX_LENGTH,
    REVIEW_MIN_LENGTH,
    AlbumRater,
    Rating,
    RatingSummary,
    Review,
    TargetType,
    TrackRatingStats,
)
from musicboard.services.rating_aggregator import aggregate_ratings, aggregate_track_ratings
from musicboard.utils.errors import RecordNotFoundError, ValidationFailureError

logger = structlog.get_logger(logger_name=__name__)


def validate_rating(value: float | None) -> float:
    """Return *value* as a float if it is a valid half-star rating.

    Raises
    ------
    ValidationFailureError
        Missing, not a number, off the 0.5-5.0 scale, or not a multiple of 0.5.
    """
    if value is None or isinstance(value, bool):
        raise ValidationFailureError(message="Please select a rating")
    try:
        rating = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationFailureError(message="Rating must be a number") from exc

    if math.isnan(rating) or not RATING_MIN <= rating <= RATING_MAX or (rating / RATING_STEP) % 1 != 0:
        raise ValidationFailureError(
            message=f"Rating must be between {RATING_MIN} and {RATING_MAX} in steps of {RATING_STEP}"
        )
    return rating


def validate_review_text(text: str | None) -> str:
    """Return the stripped review text if its length is acceptable."""
    stripped = (text or "").strip()
    if len(stripped) < REVIEW_MIN_LENGTH:
        raise ValidationFailureError(
            message=f"Review must be at least {REVIEW_MIN_LENGTH} characters"
        )
    if len(stripped) > REVIEW_MAX_LENGTH:
        raise ValidationFailureError(
            message=f"Review must be at most {REVIEW_MAX_LENGTH} characters"
        )
    return stripped


class RatingService:
    """Ratings, per-track statistics and reviews over an :class:`IRatingProvider`."""

    def __init__(
        self,
        rating_store: IRatingProvider,
        profile_store: IProfileProvider | None = None,
        raters_limit: int = 10,
    ) -> None:
        self._store = rating_store
        self._profiles = profile_store
        self._raters_limit = raters_limit

    # -- Ratings ---------------------------------------------------------------

    async def rate(
        self,
        user_id: str,
        target_id: str,
        target_type: TargetType,
        rating: float | None,
        *,
        album_id: str | None = None,
        album_name: str | None = None,
        artist_name: str | None = None,
        image_url: str | None = None,
    ) -> RatingSummary:
        """Save the user's rating and return the target's updated summary.

        Track ratings must name their parent *album_id* so the album page
        can gather them.
        """
        value = validate_rating(rating)
        if target_type is TargetType.TRACK and not album_id:
            raise ValidationFailureError(message="album_id is required for track ratings")

        await self._store.upsert_rating(
            Rating(
                user_id=user_id,
                target_id=target_id,
                target_type=target_type,
                rating=value,
                album_id=album_id,
                album_name=album_name,
                artist_name=artist_name,
                image_url=image_url,
            )
        )
        return await self.get_summary(target_id, target_type, user_id)

    async def get_summary(
        self, target_id: str, target_type: TargetType, user_id: str | None = None
    ) -> RatingSummary:
        rows = await self._store.get_ratings(target_id, target_type)
        summary = aggregate_ratings(rows, user_id=user_id, target_id=target_id)
        logger.debug(
            "rating_summary_computed",
            target_id=target_id,
            count=summary.count,
            average=summary.display_average,
        )
        return summary

    async def get_track_summaries(self, album_id: str) -> dict[str, TrackRatingStats]:
        """Per-track count and average for every rated track on an album."""
        rows = await self._store.get_track_ratings_for_album(album_id)
        return aggregate_track_ratings(rows)

    async def get_user_ratings(self, user_id: str, limit: int = 20) -> list[Rating]:
        return await self._store.get_recent_ratings_by_user(user_id, limit)

    async def get_album_raters(self, album_id: str, limit: int | None = None) -> list[AlbumRater]:
        """The album's latest raters, each with their public profile attached."""
        rows = await self._store.get_latest_ratings(album_id, TargetType.ALBUM, limit or self._raters_limit)
        profiles = {}
        if self._profiles is not None and rows:
            profiles = await self._profiles.get_profiles(list(dict.fromkeys(r.user_id for r in rows)))

        raters = []
        for row in rows:
            profile = profiles.get(row.user_id)
            raters.append(
                AlbumRater(
                    user_id=row.user_id,
                    rating=row.rating,
                    rated_at=row.updated_at,
                    username=profile.username if profile else None,
                    display_name=profile.display_name if profile else None,
                    avatar_url=profile.avatar_url if profile else None,
                )
            )
        return raters

    # -- Reviews ---------------------------------------------------------------

    async def submit_review(
        self,
        user_id: str,
        target_id: str,
        rating: float | None,
        review_text: str | None,
        target_type: TargetType = TargetType.ALBUM,
    ) -> Review:
        """Validate and save a review, replacing the user's earlier one."""
        value = validate_rating(rating)
        text = validate_review_text(review_text)

        review = await self._store.upsert_review(
            Review(
                user_id=user_id,
                target_id=target_id,
                target_type=target_type,
                rating=value,
                review_text=text,
            )
        )
        logger.info("review_submitted", user_id=user_id, target_id=target_id)
        return review

    async def get_reviews(self, target_id: str, limit: int = 50) -> list[Review]:
        return await self._store.get_reviews(target_id, limit)

    async def get_review(self, user_id: str, target_id: str) -> Review:
        review = await self._store.get_review(user_id, target_id)
        if review is None:
            raise RecordNotFoundError(message="Review not found")
        return review

    async def delete_review(self, user_id: str, target_id: str) -> None:
        if not await self._store.delete_review(user_id, target_id):
            raise RecordNotFoundError(message="Review not found")
