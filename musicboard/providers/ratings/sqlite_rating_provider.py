"""SQLite-backed rating and review store.

Persists album ratings, track ratings and reviews to a local SQLite
database (``data/musicboard.db`` by default) using ``aiosqlite``.

Album and track ratings live in separate tables with the same columns;
track rows also record their parent ``album_id`` so an album page can
load every track rating in one query.  All three tables are unique on
``(user_id, target_id)`` and written with ``INSERT ... ON CONFLICT DO
UPDATE``, so a second rating from the same user overwrites the first.
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite
import structlog

from musicboard.interfaces.rating_provider import IRatingProvider
from musicboard.models.ratings import Rating, Review, TargetType

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/musicboard.db")
_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"

_TABLES = {
    TargetType.ALBUM: "album_ratings",
    TargetType.TRACK: "track_ratings",
}

_CREATE_RATINGS_TABLE_SQL = f"""\
CREATE TABLE IF NOT EXISTS {{table}} (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id      TEXT    NOT NULL,
    target_id    TEXT    NOT NULL,
    album_id     TEXT,
    rating       REAL    NOT NULL,
    album_name   TEXT,
    artist_name  TEXT,
    image_url    TEXT,
    created_at   TEXT    NOT NULL DEFAULT ({_NOW}),
    updated_at   TEXT    NOT NULL DEFAULT ({_NOW}),
    UNIQUE(user_id, target_id)
);
"""

_CREATE_REVIEWS_TABLE_SQL = f"""\
CREATE TABLE IF NOT EXISTS reviews (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id      TEXT    NOT NULL,
    target_id    TEXT    NOT NULL,
    target_type  TEXT    NOT NULL DEFAULT 'album',
    rating       REAL    NOT NULL,
    review_text  TEXT    NOT NULL,
    created_at   TEXT    NOT NULL DEFAULT ({_NOW}),
    updated_at   TEXT    NOT NULL DEFAULT ({_NOW}),
    UNIQUE(user_id, target_id)
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_album_ratings_target ON album_ratings(target_id);",
    "CREATE INDEX IF NOT EXISTS idx_album_ratings_user ON album_ratings(user_id, updated_at);",
    "CREATE INDEX IF NOT EXISTS idx_track_ratings_target ON track_ratings(target_id);",
    "CREATE INDEX IF NOT EXISTS idx_track_ratings_album ON track_ratings(album_id);",
    "CREATE INDEX IF NOT EXISTS idx_reviews_target ON reviews(target_id);",
]

_UPSERT_RATING_SQL = f"""\
INSERT INTO {{table}} (user_id, target_id, album_id, rating, album_name, artist_name, image_url)
VALUES (?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(user_id, target_id)
DO UPDATE SET rating      = excluded.rating,
              album_id    = COALESCE(excluded.album_id, album_id),
              album_name  = COALESCE(excluded.album_name, album_name),
              artist_name = COALESCE(excluded.artist_name, artist_name),
              image_url   = COALESCE(excluded.image_url, image_url),
              updated_at  = {_NOW};
"""

_RATING_COLUMNS = (
    "user_id, target_id, album_id, rating, album_name, artist_name, image_url, created_at, updated_at"
)

_UPSERT_REVIEW_SQL = f"""\
INSERT INTO reviews (user_id, target_id, target_type, rating, review_text)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(user_id, target_id)
DO UPDATE SET rating      = excluded.rating,
              review_text = excluded.review_text,
              target_type = excluded.target_type,
              updated_at  = {_NOW};
"""

_REVIEW_COLUMNS = "id, user_id, target_id, target_type, rating, review_text, created_at, updated_at"


def _rating_from_row(row: aiosqlite.Row, target_type: TargetType) -> Rating:
    return Rating(target_type=target_type, **dict(row))


class SQLiteRatingProvider(IRatingProvider):
    """SQLite-backed rating and review persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the rating and review tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            for table in _TABLES.values():
                await db.execute(_CREATE_RATINGS_TABLE_SQL.format(table=table))
            await db.execute(_CREATE_REVIEWS_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("rating_db_initialized", path=str(self._db_path))

    # -- Ratings ---------------------------------------------------------------

    async def upsert_rating(self, rating: Rating) -> Rating:
        """Store or overwrite a rating.  Returns the stored row."""
        table = _TABLES[rating.target_type]
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            await db.execute(
                _UPSERT_RATING_SQL.format(table=table),
                (
                    rating.user_id,
                    rating.target_id,
                    rating.album_id,
                    rating.rating,
                    rating.album_name,
                    rating.artist_name,
                    rating.image_url,
                ),
            )
            await db.commit()
            cursor = await db.execute(
                f"SELECT {_RATING_COLUMNS} FROM {table} WHERE user_id = ? AND target_id = ?",
                (rating.user_id, rating.target_id),
            )
            row = await cursor.fetchone()

        logger.info(
            "rating_upserted",
            user_id=rating.user_id,
            target_id=rating.target_id,
            target_type=rating.target_type.value,
            rating=rating.rating,
        )
        return _rating_from_row(row, rating.target_type)

    async def get_ratings(self, target_id: str, target_type: TargetType) -> list[Rating]:
        table = _TABLES[target_type]
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_RATING_COLUMNS} FROM {table} WHERE target_id = ? ORDER BY created_at, id",
                (target_id,),
            )
            rows = await cursor.fetchall()
        return [_rating_from_row(r, target_type) for r in rows]

    async def get_user_rating(
        self, user_id: str, target_id: str, target_type: TargetType
    ) -> Rating | None:
        table = _TABLES[target_type]
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_RATING_COLUMNS} FROM {table} WHERE user_id = ? AND target_id = ?",
                (user_id, target_id),
            )
            row = await cursor.fetchone()
        return _rating_from_row(row, target_type) if row else None

    async def get_track_ratings_for_album(self, album_id: str) -> list[Rating]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_RATING_COLUMNS} FROM track_ratings WHERE album_id = ? ORDER BY created_at, id",
                (album_id,),
            )
            rows = await cursor.fetchall()
        return [_rating_from_row(r, TargetType.TRACK) for r in rows]

    async def get_recent_ratings_by_user(self, user_id: str, limit: int = 20) -> list[Rating]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_RATING_COLUMNS} FROM album_ratings WHERE user_id = ? "
                "ORDER BY updated_at DESC, id DESC LIMIT ?",
                (user_id, limit),
            )
            rows = await cursor.fetchall()
        return [_rating_from_row(r, TargetType.ALBUM) for r in rows]

    async def get_latest_ratings(self, target_id: str, target_type: TargetType, limit: int = 10) -> list[Rating]:
        table = _TABLES[target_type]
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_RATING_COLUMNS} FROM {table} WHERE target_id = ? "
                "ORDER BY updated_at DESC, id DESC LIMIT ?",
                (target_id, limit),
            )
            rows = await cursor.fetchall()
        return [_rating_from_row(r, target_type) for r in rows]

    # -- Reviews ---------------------------------------------------------------

    async def upsert_review(self, review: Review) -> Review:
        """Store or edit a review in place.  Returns the stored row."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            await db.execute(
                _UPSERT_REVIEW_SQL,
                (
                    review.user_id,
                    review.target_id,
                    review.target_type.value,
                    review.rating,
                    review.review_text,
                ),
            )
            await db.commit()
            cursor = await db.execute(
                f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE user_id = ? AND target_id = ?",
                (review.user_id, review.target_id),
            )
            row = await cursor.fetchone()

        logger.info(
            "review_upserted",
            user_id=review.user_id,
            target_id=review.target_id,
            length=len(review.review_text),
        )
        return Review(**dict(row))

    async def get_reviews(self, target_id: str, limit: int = 50) -> list[Review]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE target_id = ? "
                "ORDER BY updated_at DESC, id DESC LIMIT ?",
                (target_id, limit),
            )
            rows = await cursor.fetchall()
        return [Review(**dict(r)) for r in rows]

    async def get_review(self, user_id: str, target_id: str) -> Review | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE user_id = ? AND target_id = ?",
                (user_id, target_id),
            )
            row = await cursor.fetchone()
        return Review(**dict(row)) if row else None

    async def delete_review(self, user_id: str, target_id: str) -> bool:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "DELETE FROM reviews WHERE user_id = ? AND target_id = ?",
                (user_id, target_id),
            )
            await db.commit()
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("review_deleted", user_id=user_id, target_id=target_id)
        return deleted

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return "sqlite_ratings"
