"""Abstract base class for board persistence.

Boards own an ordered list of items and a set of likes.  The contract
requires that the like row and the board's ``likes_count`` change
together: an implementation must apply both writes atomically, and a
repeated like (or an unlike with nothing to remove) must leave the
counter untouched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from musicboard.models.boards import Board, BoardItem, BoardSort, BoardType, LikeState


class IBoardProvider(ABC):
    """Contract for board stores."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables and indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def create_board(
        self,
        owner_id: str,
        title: str,
        board_type: BoardType,
        description: str | None = None,
        is_public: bool = True,
    ) -> Board:
        """Insert a new, empty board and return it."""

    @abstractmethod
    async def get_board(self, board_id: int) -> Board | None:
        """Return the board row, or ``None`` if it doesn't exist."""

    @abstractmethod
    async def get_items(self, board_id: int) -> list[BoardItem]:
        """Return the board's items ordered by ``position``."""

    @abstractmethod
    async def list_public_boards(self, limit: int = 20, sort: BoardSort = BoardSort.RECENT) -> list[Board]:
        """Return public boards for the feed.

        Parameters
        ----------
        limit:
            Maximum number of boards.
        sort:
            ``RECENT`` orders by creation time, ``POPULAR`` by
            ``likes_count`` (ties broken by recency).
        """

    @abstractmethod
    async def list_boards_by_owner(self, owner_id: str) -> list[Board]:
        """Return every board owned by *owner_id*, public or not, newest first."""

    @abstractmethod
    async def add_item(
        self,
        board_id: int,
        title: str,
        external_id: str,
        artist: str | None = None,
        image_url: str | None = None,
    ) -> BoardItem:
        """Append an item at the next free position and return it."""

    @abstractmethod
    async def remove_item(self, board_id: int, item_id: int) -> bool:
        """Remove an item and close the gap in positions.

        Returns ``False`` if the item is not on this board.
        """

    @abstractmethod
    async def like_board(self, board_id: int, user_id: str) -> LikeState:
        """Record a like; a no-op if the user already likes the board."""

    @abstractmethod
    async def unlike_board(self, board_id: int, user_id: str) -> LikeState:
        """Remove a like; a no-op if the user does not like the board."""

    @abstractmethod
    async def is_liked(self, board_id: int, user_id: str) -> bool:
        """Return ``True`` if *user_id* likes the board."""

    @abstractmethod
    async def delete_board(self, board_id: int) -> bool:
        """Delete a board with its items and likes.

        Returns ``False`` if the board didn't exist.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
