"""Listen Later stores."""

from musicboard.providers.listen_later.sqlite_listen_later_provider import SQLiteListenLaterProvider

__all__ = ["SQLiteListenLaterProvider"]
