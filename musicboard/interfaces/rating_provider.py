"""Abstract base class for rating and review persistence.

Album and track ratings share one contract, selected by
:class:`~musicboard.models.ratings.TargetType`.  Both ratings and reviews
are unique per ``(user_id, target_id)``; writes are upserts, so re-rating
overwrites the earlier row instead of adding a second one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from musicboard.models.ratings import Rating, Review, TargetType


class IRatingProvider(ABC):
    """Contract for rating/review stores.

    Implementations persist raw rows only.  Averages and histograms are
    computed by the rating aggregator on every read.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables and indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def upsert_rating(self, rating: Rating) -> Rating:
        """Insert *rating* or overwrite the caller's existing row.

        Returns
        -------
        Rating
            The stored row, with ``created_at`` from the first write and
            ``updated_at`` from this one.
        """

    @abstractmethod
    async def get_ratings(self, target_id: str, target_type: TargetType) -> list[Rating]:
        """Return every rating for one album or track."""

    @abstractmethod
    async def get_user_rating(
        self, user_id: str, target_id: str, target_type: TargetType
    ) -> Rating | None:
        """Return one user's rating for a target, or ``None``."""

    @abstractmethod
    async def get_track_ratings_for_album(self, album_id: str) -> list[Rating]:
        """Return all track ratings whose parent album is *album_id*."""

    @abstractmethod
    async def get_recent_ratings_by_user(self, user_id: str, limit: int = 20) -> list[Rating]:
        """Return a user's album ratings, most recently updated first."""

    @abstractmethod
    async def get_latest_ratings(self, target_id: str, target_type: TargetType, limit: int = 10) -> list[Rating]:
        """Return up to *limit* ratings for a target, most recently updated first."""

    @abstractmethod
    async def upsert_review(self, review: Review) -> Review:
        """Insert *review* or edit the caller's existing review in place."""

    @abstractmethod
    async def get_reviews(self, target_id: str, limit: int = 50) -> list[Review]:
        """Return reviews for a target, most recently updated first."""

    @abstractmethod
    async def get_review(self, user_id: str, target_id: str) -> Review | None:
        """Return one user's review of a target, or ``None``."""

    @abstractmethod
    async def delete_review(self, user_id: str, target_id: str) -> bool:
        """Delete one user's review.  Returns ``False`` if there was none."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
