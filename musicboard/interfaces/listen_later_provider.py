"""Abstract base class for Listen Later persistence.

An album appears at most once in a user's queue; saving it again must
leave the existing entry untouched and report that nothing was added.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from musicboard.models.listen_later import ListenLaterEntry


class IListenLaterProvider(ABC):
    """Contract for Listen Later stores."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables and indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def add_entry(self, entry: ListenLaterEntry) -> tuple[ListenLaterEntry, bool]:
        """Queue *entry* unless the user already saved the album.

        Returns the stored entry and ``True`` if it was inserted now, or
        the existing entry and ``False`` if it was already queued.
        """

    @abstractmethod
    async def list_entries(self, user_id: str, limit: int = 50) -> list[ListenLaterEntry]:
        """Return a user's queue, most recently saved first."""

    @abstractmethod
    async def remove_entry(self, user_id: str, album_id: str) -> bool:
        """Drop an album from the queue.  Returns ``False`` if it wasn't queued."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
