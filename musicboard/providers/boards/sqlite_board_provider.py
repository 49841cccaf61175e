"""SQLite-backed board store.

Three tables: ``boards``, ``board_items`` (ordered by a gap-free
``position`` per board) and ``board_likes`` (one row per user per board).

``boards.likes_count`` is a denormalised copy of the number of like rows.
Liking and unliking change the like row and the counter inside a single
``BEGIN IMMEDIATE`` transaction, and the counter only moves when the like
row actually changed, so the two can never disagree.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import aiosqlite
import structlog

from musicboard.interfaces.board_provider import IBoardProvider
from musicboard.models.boards import Board, BoardItem, BoardSort, BoardType, LikeState
from musicboard.utils.errors import RecordNotFoundError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/musicboard.db")

_CREATE_TABLES_SQL = [
    """\
CREATE TABLE IF NOT EXISTS boards (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    owner_id     TEXT    NOT NULL,
    title        TEXT    NOT NULL,
    board_type   TEXT    NOT NULL,
    description  TEXT,
    is_public    INTEGER NOT NULL DEFAULT 1,
    likes_count  INTEGER NOT NULL DEFAULT 0 CHECK (likes_count >= 0),
    created_at   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
""",
    """\
CREATE TABLE IF NOT EXISTS board_items (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    board_id     INTEGER NOT NULL REFERENCES boards(id),
    title        TEXT    NOT NULL,
    artist       TEXT,
    image_url    TEXT,
    external_id  TEXT    NOT NULL,
    position     INTEGER NOT NULL
);
""",
    """\
CREATE TABLE IF NOT EXISTS board_likes (
    board_id     INTEGER NOT NULL REFERENCES boards(id),
    user_id      TEXT    NOT NULL,
    created_at   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    UNIQUE(board_id, user_id)
);
""",
]

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_boards_owner ON boards(owner_id);",
    "CREATE INDEX IF NOT EXISTS idx_boards_public ON boards(is_public, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_board_items_board ON board_items(board_id, position);",
]

_BOARD_COLUMNS = "id, owner_id, title, board_type, description, is_public, likes_count, created_at"
_ITEM_COLUMNS = "id, board_id, title, artist, image_url, external_id, position"

_ORDER_BY = {
    BoardSort.RECENT: "created_at DESC, id DESC",
    BoardSort.POPULAR: "likes_count DESC, created_at DESC, id DESC",
}


def _board_from_row(row: aiosqlite.Row) -> Board:
    data = dict(row)
    data["is_public"] = bool(data["is_public"])
    return Board(**data)


class SQLiteBoardProvider(IBoardProvider):
    """SQLite-backed board persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the board tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            for table_sql in _CREATE_TABLES_SQL:
                await db.execute(table_sql)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("board_db_initialized", path=str(self._db_path))

    # -- Boards ----------------------------------------------------------------

    async def create_board(
        self,
        owner_id: str,
        title: str,
        board_type: BoardType,
        description: str | None = None,
        is_public: bool = True,
    ) -> Board:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "INSERT INTO boards (owner_id, title, board_type, description, is_public) "
                "VALUES (?, ?, ?, ?, ?)",
                (owner_id, title, board_type.value, description, int(is_public)),
            )
            board_id = cursor.lastrowid
            await db.commit()
            cursor = await db.execute(f"SELECT {_BOARD_COLUMNS} FROM boards WHERE id = ?", (board_id,))
            row = await cursor.fetchone()

        logger.info("board_created", board_id=board_id, owner_id=owner_id, board_type=board_type.value)
        return _board_from_row(row)

    async def get_board(self, board_id: int) -> Board | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(f"SELECT {_BOARD_COLUMNS} FROM boards WHERE id = ?", (board_id,))
            row = await cursor.fetchone()
        return _board_from_row(row) if row else None

    async def get_items(self, board_id: int) -> list[BoardItem]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_ITEM_COLUMNS} FROM board_items WHERE board_id = ? ORDER BY position",
                (board_id,),
            )
            rows = await cursor.fetchall()
        return [BoardItem(**dict(r)) for r in rows]

    async def list_public_boards(self, limit: int = 20, sort: BoardSort = BoardSort.RECENT) -> list[Board]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_BOARD_COLUMNS} FROM boards WHERE is_public = 1 "
                f"ORDER BY {_ORDER_BY[sort]} LIMIT ?",
                (limit,),
            )
            rows = await cursor.fetchall()
        return [_board_from_row(r) for r in rows]

    async def list_boards_by_owner(self, owner_id: str) -> list[Board]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_BOARD_COLUMNS} FROM boards WHERE owner_id = ? ORDER BY created_at DESC, id DESC",
                (owner_id,),
            )
            rows = await cursor.fetchall()
        return [_board_from_row(r) for r in rows]

    async def delete_board(self, board_id: int) -> bool:
        """Delete the board, its items and its likes in one transaction."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                await db.execute("DELETE FROM board_likes WHERE board_id = ?", (board_id,))
                await db.execute("DELETE FROM board_items WHERE board_id = ?", (board_id,))
                cursor = await db.execute("DELETE FROM boards WHERE id = ?", (board_id,))
                deleted = cursor.rowcount > 0
                await db.commit()
            except sqlite3.Error:
                await db.rollback()
                raise
        if deleted:
            logger.info("board_deleted", board_id=board_id)
        return deleted

    # -- Items -----------------------------------------------------------------

    async def add_item(
        self,
        board_id: int,
        title: str,
        external_id: str,
        artist: str | None = None,
        image_url: str | None = None,
    ) -> BoardItem:
        """Append an item after the current last position."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("BEGIN IMMEDIATE")
            try:
                cursor = await db.execute(
                    "INSERT INTO board_items (board_id, title, artist, image_url, external_id, position) "
                    "VALUES (?, ?, ?, ?, ?, "
                    "(SELECT COALESCE(MAX(position) + 1, 0) FROM board_items WHERE board_id = ?))",
                    (board_id, title, artist, image_url, external_id, board_id),
                )
                item_id = cursor.lastrowid
                await db.commit()
            except sqlite3.Error:
                await db.rollback()
                raise
            cursor = await db.execute(f"SELECT {_ITEM_COLUMNS} FROM board_items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()

        logger.info("board_item_added", board_id=board_id, item_id=item_id, position=row["position"])
        return BoardItem(**dict(row))

    async def remove_item(self, board_id: int, item_id: int) -> bool:
        """Remove an item and shift every later item up by one position."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("BEGIN IMMEDIATE")
            try:
                cursor = await db.execute(
                    "SELECT position FROM board_items WHERE id = ? AND board_id = ?",
                    (item_id, board_id),
                )
                row = await cursor.fetchone()
                if row is None:
                    await db.rollback()
                    return False
                await db.execute("DELETE FROM board_items WHERE id = ?", (item_id,))
                await db.execute(
                    "UPDATE board_items SET position = position - 1 WHERE board_id = ? AND position > ?",
                    (board_id, row["position"]),
                )
                await db.commit()
            except sqlite3.Error:
                await db.rollback()
                raise

        logger.info("board_item_removed", board_id=board_id, item_id=item_id)
        return True

    # -- Likes -----------------------------------------------------------------

    async def like_board(self, board_id: int, user_id: str) -> LikeState:
        return await self._set_like(board_id, user_id, liked=True)

    async def unlike_board(self, board_id: int, user_id: str) -> LikeState:
        return await self._set_like(board_id, user_id, liked=False)

    async def is_liked(self, board_id: int, user_id: str) -> bool:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "SELECT 1 FROM board_likes WHERE board_id = ? AND user_id = ?",
                (board_id, user_id),
            )
            row = await cursor.fetchone()
        return row is not None

    async def _set_like(self, board_id: int, user_id: str, liked: bool) -> LikeState:
        """Apply a like or unlike and the matching counter change atomically.

        Raises
        ------
        RecordNotFoundError
            The board doesn't exist.
        """
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("BEGIN IMMEDIATE")
            try:
                cursor = await db.execute("SELECT likes_count FROM boards WHERE id = ?", (board_id,))
                if await cursor.fetchone() is None:
                    raise RecordNotFoundError(message=f"Board {board_id} not found", provider_name="sqlite_boards")

                if liked:
                    cursor = await db.execute(
                        "INSERT OR IGNORE INTO board_likes (board_id, user_id) VALUES (?, ?)",
                        (board_id, user_id),
                    )
                    if cursor.rowcount > 0:
                        await db.execute(
                            "UPDATE boards SET likes_count = likes_count + 1 WHERE id = ?",
                            (board_id,),
                        )
                else:
                    cursor = await db.execute(
                        "DELETE FROM board_likes WHERE board_id = ? AND user_id = ?",
                        (board_id, user_id),
                    )
                    if cursor.rowcount > 0:
                        await db.execute(
                            "UPDATE boards SET likes_count = MAX(likes_count - 1, 0) WHERE id = ?",
                            (board_id,),
                        )

                cursor = await db.execute("SELECT likes_count FROM boards WHERE id = ?", (board_id,))
                count_row = await cursor.fetchone()
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "board_like_changed",
            board_id=board_id,
            user_id=user_id,
            liked=liked,
            likes_count=count_row["likes_count"],
        )
        return LikeState(board_id=board_id, liked=liked, likes_count=count_row["likes_count"])

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return "sqlite_boards"
