"""SQLite-backed profile store."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import aiosqlite
import structlog

from musicboard.interfaces.profile_provider import IProfileProvider
from musicboard.models.profile import Profile
from musicboard.utils.errors import ValidationFailureError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/musicboard.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS profiles (
    id            TEXT PRIMARY KEY,
    username      TEXT NOT NULL UNIQUE,
    display_name  TEXT,
    avatar_url    TEXT,
    bio           TEXT,
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_UPSERT_SQL = """\
INSERT INTO profiles (id, username, display_name, avatar_url, bio)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(id)
DO UPDATE SET username     = excluded.username,
              display_name = excluded.display_name,
              avatar_url   = excluded.avatar_url,
              bio          = excluded.bio;
"""

_COLUMNS = "id, username, display_name, avatar_url, bio, created_at"


class SQLiteProfileProvider(IProfileProvider):
    """SQLite-backed profile persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the profiles table if it doesn't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            await db.commit()
        logger.info("profile_db_initialized", path=str(self._db_path))

    async def upsert_profile(self, profile: Profile) -> Profile:
        """Create or update a profile; usernames are unique across users."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            try:
                await db.execute(
                    _UPSERT_SQL,
                    (profile.id, profile.username, profile.display_name, profile.avatar_url, profile.bio),
                )
                await db.commit()
            except sqlite3.IntegrityError as exc:
                await db.rollback()
                raise ValidationFailureError(
                    message=f"Username '{profile.username}' is already taken",
                    provider_name=self.get_provider_name(),
                ) from exc
            cursor = await db.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id = ?", (profile.id,))
            row = await cursor.fetchone()

        logger.info("profile_upserted", user_id=profile.id, username=profile.username)
        return Profile(**dict(row))

    async def get_profile(self, user_id: str) -> Profile | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
        return Profile(**dict(row)) if row else None

    async def get_profile_by_username(self, username: str) -> Profile | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(f"SELECT {_COLUMNS} FROM profiles WHERE username = ?", (username,))
            row = await cursor.fetchone()
        return Profile(**dict(row)) if row else None

    async def get_profiles(self, user_ids: list[str]) -> dict[str, Profile]:
        """Load several profiles in one query."""
        if not user_ids:
            return {}
        placeholders = ", ".join("?" for _ in user_ids)
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM profiles WHERE id IN ({placeholders})",
                list(user_ids),
            )
            rows = await cursor.fetchall()
        return {row["id"]: Profile(**dict(row)) for row in rows}

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return "sqlite_profiles"
