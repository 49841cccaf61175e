"""Listen Later use cases: save an album from its page, browse and prune the queue."""

from __future__ import annotations

import structlog

from musicboard.interfaces.listen_later_provider import IListenLaterProvider
from musicboard.models.listen_later import ListenLaterEntry, ListenLaterResult
from musicboard.utils.errors import RecordNotFoundError, ValidationFailureError

logger = structlog.get_logger(logger_name=__name__)

ADDED_MESSAGE = "Added to Listen Later"
ALREADY_QUEUED_MESSAGE = "Already in Listen Later"


class ListenLaterService:
    """Listen Later operations over an :class:`IListenLaterProvider`."""

    def __init__(self, store: IListenLaterProvider, page_size: int = 50) -> None:
        self._store = store
        self._page_size = page_size

    async def add(
        self,
        user_id: str,
        album_id: str,
        album_name: str | None = None,
        artist_name: str | None = None,
        image_url: str | None = None,
    ) -> ListenLaterResult:
        """Queue an album; saving one that is already queued is not an error."""
        album_id = (album_id or "").strip()
        if not album_id:
            raise ValidationFailureError(message="Album is required")

        entry, added = await self._store.add_entry(
            ListenLaterEntry(
                user_id=user_id,
                album_id=album_id,
                album_name=album_name,
                artist_name=artist_name,
                image_url=image_url,
            )
        )
        return ListenLaterResult(
            added=added,
            message=ADDED_MESSAGE if added else ALREADY_QUEUED_MESSAGE,
            entry=entry,
        )

    async def list_queue(self, user_id: str, limit: int | None = None) -> list[ListenLaterEntry]:
        return await self._store.list_entries(user_id, limit or self._page_size)

    async def remove(self, user_id: str, album_id: str) -> None:
        if not await self._store.remove_entry(user_id, album_id):
            raise RecordNotFoundError(message="Album is not in your Listen Later queue")
