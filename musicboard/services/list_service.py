"""List use cases: publish, browse, like and delete narrative lists."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from musicboard.interfaces.list_provider import IListProvider
from musicboard.models.boards import BoardSort
from musicboard.models.lists import DEFAULT_COVER, DEFAULT_LIST_GENRE, ListItem, ListLikeState, MusicList
from musicboard.utils.errors import PermissionDeniedError, RecordNotFoundError, ValidationFailureError

logger = structlog.get_logger(logger_name=__name__)


class ListService:
    """List operations over an :class:`IListProvider`."""

    def __init__(self, list_store: IListProvider, page_size: int = 20) -> None:
        self._store = list_store
        self._page_size = page_size

    async def publish_list(
        self,
        owner_id: str,
        title: str,
        items: Sequence[ListItem],
        description: str = "",
        story: str | None = None,
        genre: str | None = None,
        is_public: bool = True,
    ) -> MusicList:
        """Validate and store a list with all of its items.

        Items without a genre inherit the list's genre; items without an
        emoji get the default cover.
        """
        title = (title or "").strip()
        if not title or not items:
            raise ValidationFailureError(message="Please add a title and at least one album")

        list_genre = (genre or "").strip() or DEFAULT_LIST_GENRE
        cleaned: list[ListItem] = []
        for position, item in enumerate(items):
            album_title = item.album_title.strip()
            artist = item.artist.strip()
            if not album_title or not artist:
                raise ValidationFailureError(message="Please fill in album title and artist")
            cleaned.append(
                ListItem(
                    album_title=album_title,
                    artist=artist,
                    genre=item.genre.strip() or list_genre,
                    emoji=item.emoji.strip() or DEFAULT_COVER,
                    position=position,
                )
            )

        created = await self._store.create_list(
            MusicList(
                owner_id=owner_id,
                title=title,
                description=(description or "").strip(),
                story=(story or "").strip() or None,
                genre=list_genre,
                is_public=is_public,
                items=cleaned,
            )
        )
        logger.info("list_published", list_id=created.id, items=len(created.items))
        return created

    async def get_list(self, list_id: int, viewer_id: str | None = None) -> MusicList:
        music_list = await self._store.get_list(list_id)
        if music_list is None or (not music_list.is_public and music_list.owner_id != viewer_id):
            raise RecordNotFoundError(message=f"List {list_id} not found")
        return music_list

    async def list_lists(self, sort: BoardSort = BoardSort.POPULAR, limit: int | None = None) -> list[MusicList]:
        return await self._store.list_public_lists(limit or self._page_size, sort)

    async def delete_list(self, list_id: int, user_id: str) -> None:
        music_list = await self.get_list(list_id, user_id)
        if music_list.owner_id != user_id:
            raise PermissionDeniedError(message="Only the list owner can delete this list")
        await self._store.delete_list(list_id)

    async def toggle_like(self, list_id: int, user_id: str) -> ListLikeState:
        """Like the list if *user_id* doesn't already, otherwise unlike it."""
        await self.get_list(list_id, user_id)
        if await self._store.is_liked(list_id, user_id):
            state = await self._store.unlike_list(list_id, user_id)
        else:
            state = await self._store.like_list(list_id, user_id)
        logger.info("list_like_toggled", list_id=list_id, liked=state.liked, likes_count=state.likes_count)
        return state
