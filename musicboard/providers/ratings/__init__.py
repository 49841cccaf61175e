"""Rating and review stores."""

from musicboard.providers.ratings.sqlite_rating_provider import SQLiteRatingProvider

__all__ = ["SQLiteRatingProvider"]
