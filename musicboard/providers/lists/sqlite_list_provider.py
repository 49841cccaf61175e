"""SQLite-backed list store.

Lists are published in one step: the list row and all of its items are
inserted inside one transaction, so a reader never sees a half-written
list.  Item positions follow the order the items were submitted in.

Likes mirror the board store: ``list_likes`` holds one row per user per
list, and the row and ``lists.likes_count`` change in one
``BEGIN IMMEDIATE`` transaction.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import aiosqlite
import structlog

from musicboard.interfaces.list_provider import IListProvider
from musicboard.models.boards import BoardSort
from musicboard.models.lists import ListItem, ListLikeState, MusicList
from musicboard.utils.errors import RecordNotFoundError, StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/musicboard.db")

_CREATE_TABLES_SQL = [
    """\
CREATE TABLE IF NOT EXISTS lists (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    owner_id     TEXT    NOT NULL,
    title        TEXT    NOT NULL,
    description  TEXT    NOT NULL DEFAULT '',
    story        TEXT,
    genre        TEXT    NOT NULL,
    is_public    INTEGER NOT NULL DEFAULT 1,
    likes_count  INTEGER NOT NULL DEFAULT 0 CHECK (likes_count >= 0),
    created_at   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
""",
    """\
CREATE TABLE IF NOT EXISTS list_items (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    list_id      INTEGER NOT NULL REFERENCES lists(id),
    album_title  TEXT    NOT NULL,
    artist       TEXT    NOT NULL,
    genre        TEXT    NOT NULL,
    emoji        TEXT    NOT NULL,
    position     INTEGER NOT NULL
);
""",
    """\
CREATE TABLE IF NOT EXISTS list_likes (
    list_id      INTEGER NOT NULL REFERENCES lists(id),
    user_id      TEXT    NOT NULL,
    created_at   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    UNIQUE(list_id, user_id)
);
""",
]

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_lists_public ON lists(is_public, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_list_items_list ON list_items(list_id, position);",
]

_LIST_COLUMNS = "id, owner_id, title, description, story, genre, is_public, likes_count, created_at"
_ITEM_COLUMNS = "id, list_id, album_title, artist, genre, emoji, position"

_ORDER_BY = {
    BoardSort.RECENT: "created_at DESC, id DESC",
    BoardSort.POPULAR: "likes_count DESC, created_at DESC, id DESC",
}


class SQLiteListProvider(IListProvider):
    """SQLite-backed list persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the list tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            for table_sql in _CREATE_TABLES_SQL:
                await db.execute(table_sql)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("list_db_initialized", path=str(self._db_path))

    async def create_list(self, music_list: MusicList) -> MusicList:
        """Insert the list and its items atomically."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                cursor = await db.execute(
                    "INSERT INTO lists (owner_id, title, description, story, genre, is_public) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        music_list.owner_id,
                        music_list.title,
                        music_list.description,
                        music_list.story,
                        music_list.genre,
                        int(music_list.is_public),
                    ),
                )
                list_id = cursor.lastrowid
                await db.executemany(
                    "INSERT INTO list_items (list_id, album_title, artist, genre, emoji, position) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    [
                        (list_id, item.album_title, item.artist, item.genre, item.emoji, position)
                        for position, item in enumerate(music_list.items)
                    ],
                )
                await db.commit()
            except sqlite3.Error:
                await db.rollback()
                raise

        logger.info(
            "list_created",
            list_id=list_id,
            owner_id=music_list.owner_id,
            items=len(music_list.items),
        )
        created = await self.get_list(list_id)
        if created is None:
            raise StoreError(message=f"List {list_id} vanished after insert", provider_name=self.get_provider_name())
        return created

    async def get_list(self, list_id: int) -> MusicList | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(f"SELECT {_LIST_COLUMNS} FROM lists WHERE id = ?", (list_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            items = await self._fetch_items(db, [list_id])
        return _list_from_row(row, items.get(list_id, []))

    async def list_public_lists(self, limit: int = 20, sort: BoardSort = BoardSort.POPULAR) -> list[MusicList]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_LIST_COLUMNS} FROM lists WHERE is_public = 1 ORDER BY {_ORDER_BY[sort]} LIMIT ?",
                (limit,),
            )
            rows = await cursor.fetchall()
            items = await self._fetch_items(db, [r["id"] for r in rows])
        return [_list_from_row(r, items.get(r["id"], [])) for r in rows]

    async def delete_list(self, list_id: int) -> bool:
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                await db.execute("DELETE FROM list_likes WHERE list_id = ?", (list_id,))
                await db.execute("DELETE FROM list_items WHERE list_id = ?", (list_id,))
                cursor = await db.execute("DELETE FROM lists WHERE id = ?", (list_id,))
                deleted = cursor.rowcount > 0
                await db.commit()
            except sqlite3.Error:
                await db.rollback()
                raise
        if deleted:
            logger.info("list_deleted", list_id=list_id)
        return deleted

    async def like_list(self, list_id: int, user_id: str) -> ListLikeState:
        return await self._set_like(list_id, user_id, liked=True)

    async def unlike_list(self, list_id: int, user_id: str) -> ListLikeState:
        return await self._set_like(list_id, user_id, liked=False)

    async def is_liked(self, list_id: int, user_id: str) -> bool:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "SELECT 1 FROM list_likes WHERE list_id = ? AND user_id = ?",
                (list_id, user_id),
            )
            row = await cursor.fetchone()
        return row is not None

    async def _set_like(self, list_id: int, user_id: str, liked: bool) -> ListLikeState:
        """Apply a like or unlike and the counter change in one transaction."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("BEGIN IMMEDIATE")
            try:
                cursor = await db.execute("SELECT likes_count FROM lists WHERE id = ?", (list_id,))
                if await cursor.fetchone() is None:
                    raise RecordNotFoundError(message=f"List {list_id} not found", provider_name="sqlite_lists")

                if liked:
                    cursor = await db.execute(
                        "INSERT OR IGNORE INTO list_likes (list_id, user_id) VALUES (?, ?)",
                        (list_id, user_id),
                    )
                    delta_sql = "UPDATE lists SET likes_count = likes_count + 1 WHERE id = ?"
                else:
                    cursor = await db.execute(
                        "DELETE FROM list_likes WHERE list_id = ? AND user_id = ?",
                        (list_id, user_id),
                    )
                    delta_sql = "UPDATE lists SET likes_count = MAX(likes_count - 1, 0) WHERE id = ?"
                if cursor.rowcount > 0:
                    await db.execute(delta_sql, (list_id,))

                cursor = await db.execute("SELECT likes_count FROM lists WHERE id = ?", (list_id,))
                count_row = await cursor.fetchone()
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info("list_like_changed", list_id=list_id, user_id=user_id, liked=liked)
        return ListLikeState(list_id=list_id, liked=liked, likes_count=count_row["likes_count"])

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return "sqlite_lists"

    @staticmethod
    async def _fetch_items(db: aiosqlite.Connection, list_ids: list[int]) -> dict[int, list[ListItem]]:
        """Load items for several lists in one query, grouped by list id."""
        if not list_ids:
            return {}
        placeholders = ", ".join("?" for _ in list_ids)
        cursor = await db.execute(
            f"SELECT {_ITEM_COLUMNS} FROM list_items WHERE list_id IN ({placeholders}) "
            "ORDER BY list_id, position",
            list_ids,
        )
        grouped: dict[int, list[ListItem]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["list_id"], []).append(ListItem(**dict(row)))
        return grouped


def _list_from_row(row: aiosqlite.Row, items: list[ListItem]) -> MusicList:
    data = dict(row)
    data["is_public"] = bool(data["is_public"])
    return MusicList(items=items, **data)
