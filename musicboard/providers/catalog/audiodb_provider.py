"""TheAudioDB catalog provider.

Backs the ``audiodb-search`` function: artist search, an artist's albums,
an album's tracks, and album search by artist and title.  TheAudioDB's
free tier uses the public API key ``2`` embedded in the base URL, so this
provider is always available.

TheAudioDB answers "nothing found" with ``null`` collections
(``{"artists": null}``); those, and any other non-list value, are
normalised to empty lists so the page can iterate the result without a
null check.  An upstream 404 is treated the same way.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from musicboard.utils.errors import InvalidActionError, NotFoundError, ValidationFailureError
from musicboard.utils.http import request_json
from musicboard.utils.logging import get_logger

_BASE_URL = "https://www.theaudiodb.com/api/v1/json/2"
_PROVIDER = "audiodb"

# action -> (endpoint, request parameter, upstream collection key)
_ACTIONS: dict[str, tuple[str, str, str]] = {
    "searchArtist": ("search.php", "query", "artists"),
    "getAlbumsByArtist": ("album.php", "artistId", "album"),
    "getTracksByAlbum": ("track.php", "albumId", "track"),
    "searchAlbum": ("searchalbum.php", "query", "album"),
}


class AudioDBProvider:
    """Catalog provider backed by TheAudioDB's JSON API.

    The ``httpx.AsyncClient`` is injected for testability and connection
    pooling; it is owned by the application lifespan.
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = _BASE_URL) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._logger = get_logger(__name__)

    # -- Public API ------------------------------------------------------------

    async def invoke(self, action: str | None, params: dict[str, Any]) -> dict[str, Any]:
        """Dispatch one ``{action, ...}`` request from the function endpoint.

        Raises
        ------
        InvalidActionError
            *action* is not one of the four supported tags.  Raised before
            any network call.
        ValidationFailureError
            The parameter the action needs is missing, or the
            ``searchAlbum`` query is not a JSON ``{"artist", "album"}`` string.
        """
        if action not in _ACTIONS:
            raise InvalidActionError(message="Invalid action", provider_name=_PROVIDER)

        _, param_name, _ = _ACTIONS[action]
        value = params.get(param_name)
        if value in (None, ""):
            raise ValidationFailureError(
                message=f"{param_name} is required for {action}",
                provider_name=_PROVIDER,
            )

        if action == "searchArtist":
            return await self.search_artist(str(value))
        if action == "getAlbumsByArtist":
            return await self.get_albums_by_artist(str(value))
        if action == "getTracksByAlbum":
            return await self.get_tracks_by_album(str(value))

        artist, album = _parse_album_query(value)
        return await self.search_album(artist, album)

    async def search_artist(self, query: str) -> dict[str, Any]:
        """Search artists by name.  Returns ``{"artists": [...]}``."""
        return await self._fetch("search.php", {"s": query}, "artists")

    async def get_albums_by_artist(self, artist_id: str) -> dict[str, Any]:
        """List an artist's albums.  Returns ``{"album": [...]}``."""
        return await self._fetch("album.php", {"i": artist_id}, "album")

    async def get_tracks_by_album(self, album_id: str) -> dict[str, Any]:
        """List an album's tracks.  Returns ``{"track": [...]}``."""
        return await self._fetch("track.php", {"m": album_id}, "track")

    async def search_album(self, artist: str, album: str) -> dict[str, Any]:
        """Find albums by artist name and title.  Returns ``{"album": [...]}``."""
        return await self._fetch("searchalbum.php", {"s": artist, "a": album}, "album")

    def is_available(self) -> bool:
        """TheAudioDB's public key needs no configuration."""
        return True

    def get_provider_name(self) -> str:
        return _PROVIDER

    # -- Private helpers -------------------------------------------------------

    async def _fetch(self, endpoint: str, params: dict[str, str], collection: str) -> dict[str, Any]:
        url = f"{self._base_url}/{endpoint}"
        try:
            data = await request_json(self._http, "GET", url, provider_name=_PROVIDER, params=params)
        except NotFoundError:
            self._logger.info("audiodb_not_found", endpoint=endpoint)
            return {collection: []}

        if not isinstance(data, dict):
            data = {}
        result = dict(data)
        if not isinstance(result.get(collection), list):
            result[collection] = []

        self._logger.info(
            "audiodb_complete",
            endpoint=endpoint,
            results=len(result[collection]),
        )
        return result


def _parse_album_query(raw: Any) -> tuple[str, str]:
    """Decode the ``searchAlbum`` query, a JSON string ``{"artist", "album"}``."""
    try:
        decoded = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as exc:
        raise ValidationFailureError(
            message="searchAlbum query must be a JSON object with artist and album",
            provider_name=_PROVIDER,
        ) from exc

    if not isinstance(decoded, dict):
        raise ValidationFailureError(
            message="searchAlbum query must be a JSON object with artist and album",
            provider_name=_PROVIDER,
        )
    return str(decoded.get("artist") or ""), str(decoded.get("album") or "")
