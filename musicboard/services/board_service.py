"""Board use cases: create, browse, curate and like boards.

Ownership checks live here, standing in for the row-level policies of a
hosted store: only a board's owner may add or remove items or delete it,
and a private board is invisible to everyone else.
"""

from __future__ import annotations

import structlog

from musicboard.interfaces.board_provider import IBoardProvider
from musicboard.models.boards import (
    BOARD_DESCRIPTION_MAX_LENGTH,
    BOARD_TITLE_MAX_LENGTH,
    Board,
    BoardDetail,
    BoardItem,
    BoardSort,
    BoardType,
    LikeState,
)
from musicboard.utils.errors import PermissionDeniedError, RecordNotFoundError, ValidationFailureError

logger = structlog.get_logger(logger_name=__name__)


class BoardService:
    """Board operations over an :class:`IBoardProvider`.

    Parameters
    ----------
    board_store:
        Persistence backend.
    page_size:
        Default number of boards in a feed page.
    """

    def __init__(self, board_store: IBoardProvider, page_size: int = 20) -> None:
        self._store = board_store
        self._page_size = page_size

    async def create_board(
        self,
        owner_id: str,
        title: str,
        board_type: BoardType | str,
        description: str | None = None,
        is_public: bool = True,
    ) -> Board:
        title = (title or "").strip()
        if not title:
            raise ValidationFailureError(message="Board title is required")
        if len(title) > BOARD_TITLE_MAX_LENGTH:
            raise ValidationFailureError(
                message=f"Board title must be at most {BOARD_TITLE_MAX_LENGTH} characters"
            )
        if description and len(description) > BOARD_DESCRIPTION_MAX_LENGTH:
            raise ValidationFailureError(
                message=f"Board description must be at most {BOARD_DESCRIPTION_MAX_LENGTH} characters"
            )
        try:
            kind = BoardType(board_type)
        except ValueError as exc:
            allowed = ", ".join(t.value for t in BoardType)
            raise ValidationFailureError(message=f"Board type must be one of: {allowed}") from exc

        return await self._store.create_board(
            owner_id=owner_id,
            title=title,
            board_type=kind,
            description=(description or "").strip() or None,
            is_public=is_public,
        )

    async def get_board_detail(self, board_id: int, viewer_id: str | None = None) -> BoardDetail:
        """Board, ordered items, and whether *viewer_id* likes it."""
        board = await self._get_visible(board_id, viewer_id)
        items = await self._store.get_items(board_id)
        is_liked = await self._store.is_liked(board_id, viewer_id) if viewer_id else False
        return BoardDetail(board=board, items=items, is_liked=is_liked)

    async def list_boards(self, sort: BoardSort = BoardSort.RECENT, limit: int | None = None) -> list[Board]:
        return await self._store.list_public_boards(limit or self._page_size, sort)

    async def list_user_boards(self, owner_id: str, viewer_id: str | None = None) -> list[Board]:
        """All of *owner_id*'s boards for the owner, only the public ones for anyone else."""
        boards = await self._store.list_boards_by_owner(owner_id)
        if viewer_id == owner_id:
            return boards
        return [b for b in boards if b.is_public]

    async def toggle_like(self, board_id: int, user_id: str) -> LikeState:
        """Like the board if *user_id* doesn't already, otherwise unlike it."""
        await self._get_visible(board_id, user_id)
        if await self._store.is_liked(board_id, user_id):
            state = await self._store.unlike_board(board_id, user_id)
        else:
            state = await self._store.like_board(board_id, user_id)
        logger.info("board_like_toggled", board_id=board_id, liked=state.liked, likes_count=state.likes_count)
        return state

    async def add_item(
        self,
        board_id: int,
        user_id: str,
        title: str,
        external_id: str,
        artist: str | None = None,
        image_url: str | None = None,
    ) -> BoardItem:
        await self._get_owned(board_id, user_id)
        title = (title or "").strip()
        external_id = (external_id or "").strip()
        if not title or not external_id:
            raise ValidationFailureError(message="Item title and external id are required")
        return await self._store.add_item(
            board_id=board_id,
            title=title,
            external_id=external_id,
            artist=artist,
            image_url=image_url,
        )

    async def remove_item(self, board_id: int, user_id: str, item_id: int) -> None:
        await self._get_owned(board_id, user_id)
        if not await self._store.remove_item(board_id, item_id):
            raise RecordNotFoundError(message=f"Item {item_id} is not on board {board_id}")

    async def delete_board(self, board_id: int, user_id: str) -> None:
        await self._get_owned(board_id, user_id)
        await self._store.delete_board(board_id)

    # -- Helpers ---------------------------------------------------------------

    async def _get_visible(self, board_id: int, viewer_id: str | None) -> Board:
        board = await self._store.get_board(board_id)
        if board is None or (not board.is_public and board.owner_id != viewer_id):
            raise RecordNotFoundError(message=f"Board {board_id} not found")
        return board

    async def _get_owned(self, board_id: int, user_id: str) -> Board:
        board = await self._get_visible(board_id, user_id)
        if board.owner_id != user_id:
            raise PermissionDeniedError(message="Only the board owner can change this board")
        return board
