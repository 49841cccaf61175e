"""List stores."""

from musicboard.providers.lists.sqlite_list_provider import SQLiteListProvider

__all__ = ["SQLiteListProvider"]
