"""Board stores."""

from musicboard.providers.boards.sqlite_board_provider import SQLiteBoardProvider

__all__ = ["SQLiteBoardProvider"]
