"""Abstract base class for list persistence.

A list is published in one step with all of its items, so
:meth:`IListProvider.create_list` must write the list row and every item
row atomically.  Likes follow the board contract: the like row and
``likes_count`` change together.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from musicboard.models.boards import BoardSort
from musicboard.models.lists import ListLikeState, MusicList


class IListProvider(ABC):
    """Contract for list stores."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables and indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def create_list(self, music_list: MusicList) -> MusicList:
        """Insert *music_list* and its items; return it with ids assigned.

        Item positions are taken from the order of ``music_list.items``.
        """

    @abstractmethod
    async def get_list(self, list_id: int) -> MusicList | None:
        """Return the list with its items, or ``None``."""

    @abstractmethod
    async def list_public_lists(self, limit: int = 20, sort: BoardSort = BoardSort.POPULAR) -> list[MusicList]:
        """Return public lists with their items for the lists page."""

    @abstractmethod
    async def delete_list(self, list_id: int) -> bool:
        """Delete a list, its items and likes.  Returns ``False`` if it didn't exist."""

    @abstractmethod
    async def like_list(self, list_id: int, user_id: str) -> ListLikeState:
        """Record a like; a repeated like leaves ``likes_count`` unchanged."""

    @abstractmethod
    async def unlike_list(self, list_id: int, user_id: str) -> ListLikeState:
        """Remove a like; ``likes_count`` never drops below zero."""

    @abstractmethod
    async def is_liked(self, list_id: int, user_id: str) -> bool:
        """Whether *user_id* currently likes the list."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
