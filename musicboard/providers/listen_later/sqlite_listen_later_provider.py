"""SQLite-backed Listen Later store.

One row per ``(user_id, album_id)``.  Saving an album twice is an
``INSERT ... ON CONFLICT DO NOTHING``; the affected row count tells the
caller whether the album was newly queued.
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite
import structlog

from musicboard.interfaces.listen_later_provider import IListenLaterProvider
from musicboard.models.listen_later import ListenLaterEntry

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/musicboard.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS listen_later (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id      TEXT    NOT NULL,
    album_id     TEXT    NOT NULL,
    album_name   TEXT,
    artist_name  TEXT,
    image_url    TEXT,
    created_at   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    UNIQUE(user_id, album_id)
);
"""

_CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_listen_later_user ON listen_later(user_id, created_at);"

_INSERT_SQL = """\
INSERT INTO listen_later (user_id, album_id, album_name, artist_name, image_url)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(user_id, album_id) DO NOTHING;
"""

_COLUMNS = "id, user_id, album_id, album_name, artist_name, image_url, created_at"


class SQLiteListenLaterProvider(IListenLaterProvider):
    """SQLite-backed Listen Later persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the listen_later table if it doesn't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            await db.execute(_CREATE_INDEX_SQL)
            await db.commit()
        logger.info("listen_later_db_initialized", path=str(self._db_path))

    async def add_entry(self, entry: ListenLaterEntry) -> tuple[ListenLaterEntry, bool]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                _INSERT_SQL,
                (entry.user_id, entry.album_id, entry.album_name, entry.artist_name, entry.image_url),
            )
            added = cursor.rowcount > 0
            await db.commit()
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM listen_later WHERE user_id = ? AND album_id = ?",
                (entry.user_id, entry.album_id),
            )
            row = await cursor.fetchone()

        logger.info("listen_later_saved", user_id=entry.user_id, album_id=entry.album_id, added=added)
        return ListenLaterEntry(**dict(row)), added

    async def list_entries(self, user_id: str, limit: int = 50) -> list[ListenLaterEntry]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM listen_later WHERE user_id = ? "
                "ORDER BY created_at DESC, id DESC LIMIT ?",
                (user_id, limit),
            )
            rows = await cursor.fetchall()
        return [ListenLaterEntry(**dict(r)) for r in rows]

    async def remove_entry(self, user_id: str, album_id: str) -> bool:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "DELETE FROM listen_later WHERE user_id = ? AND album_id = ?",
                (user_id, album_id),
            )
            await db.commit()
            removed = cursor.rowcount > 0
        if removed:
            logger.info("listen_later_removed", user_id=user_id, album_id=album_id)
        return removed

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return "sqlite_listen_later"
