"""Profile stores."""

from musicboard.providers.profiles.sqlite_profile_provider import SQLiteProfileProvider

__all__ = ["SQLiteProfileProvider"]
