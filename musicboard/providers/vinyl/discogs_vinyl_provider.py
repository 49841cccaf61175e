"""Discogs vinyl marketplace provider.

Backs the ``discogs-vinyl`` function: given an artist and an album, find
vinyl pressings in the Discogs database.  Uses the token-authenticated
``/database/search`` endpoint directly over httpx; one request per
lookup, no pagination.

Each returned :class:`VinylRelease` carries a fuzzy ``confidence``
(rapidfuzz ``token_set_ratio``) between the ``"artist album"`` query and
the Discogs title, which has the form ``"Artist - Album"``.  Results keep
Discogs' own relevance order; the confidence is informational.
"""

from __future__ import annotations

from typing import Any

import httpx

from musicboard.config.settings import Settings
from musicboard.models.vinyl import VinylRelease, VinylSearchResult
from musicboard.utils.errors import NotConfiguredError, NotFoundError, ValidationFailureError
from musicboard.utils.http import request_json
from musicboard.utils.logging import get_logger
from musicboard.utils.text_normalizer import match_confidence

_SEARCH_URL = "https://api.discogs.com/database/search"
_PROVIDER = "discogs"
_DEFAULT_PER_PAGE = 10
_DEFAULT_MAX_RESULTS = 5


class DiscogsVinylProvider:
    """Vinyl release search backed by the Discogs REST API.

    Parameters
    ----------
    settings:
        Supplies ``discogs_token``.
    http_client:
        Shared ``httpx.AsyncClient``.
    per_page:
        Results requested from Discogs.
    max_results:
        Results returned to the caller (the first *max_results* of the page).
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        per_page: int = _DEFAULT_PER_PAGE,
        max_results: int = _DEFAULT_MAX_RESULTS,
    ) -> None:
        self._token = settings.discogs_token
        self._http = http_client
        self._per_page = per_page
        self._max_results = max_results
        self._logger = get_logger(__name__)

    async def search_vinyl(self, artist: str, album: str) -> VinylSearchResult:
        """Search vinyl releases of *album* by *artist*.

        Returns an empty result (not an error) when Discogs answers 404.

        Raises
        ------
        ValidationFailureError
            *artist* or *album* is blank.
        NotConfiguredError
            No Discogs token is set.
        UpstreamError
            Any other upstream failure.
        """
        artist = (artist or "").strip()
        album = (album or "").strip()
        if not artist or not album:
            raise ValidationFailureError(message="Artist and album are required", provider_name=_PROVIDER)
        if not self.is_available():
            raise NotConfiguredError(message="Discogs API not configured", provider_name=_PROVIDER)

        query = f"{artist} {album}"
        try:
            data = await request_json(
                self._http,
                "GET",
                _SEARCH_URL,
                provider_name=_PROVIDER,
                params={"q": query, "type": "release", "format": "vinyl", "per_page": self._per_page},
                headers={"Authorization": f"Discogs token={self._token}"},
            )
        except NotFoundError:
            self._logger.info("discogs_not_found", artist=artist, album=album)
            return VinylSearchResult()

        raw_results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(raw_results, list):
            raw_results = []

        releases = [
            _to_release(item, query)
            for item in raw_results
            if isinstance(item, dict) and item.get("id") is not None
        ][: self._max_results]

        pagination = data.get("pagination") if isinstance(data, dict) else None
        total = pagination.get("items", 0) if isinstance(pagination, dict) else 0

        self._logger.info(
            "discogs_search_complete",
            artist=artist,
            album=album,
            returned=len(releases),
            total=total,
        )
        return VinylSearchResult(results=releases, total_results=int(total or 0))

    def is_available(self) -> bool:
        return bool(self._token)

    def get_provider_name(self) -> str:
        return _PROVIDER


def _join(values: Any) -> str:
    if isinstance(values, list):
        return ", ".join(str(v) for v in values if v)
    return ""


def _to_release(item: dict[str, Any], query: str) -> VinylRelease:
    title = str(item.get("title") or "")
    year = item.get("year")
    return VinylRelease(
        id=int(item["id"]),
        title=title,
        year=str(year) if year not in (None, "") else None,
        country=item.get("country"),
        format=_join(item.get("format")) or "Vinyl",
        label=_join(item.get("label")) or "Unknown Label",
        cover_image=item.get("cover_image") or item.get("thumb"),
        uri=item.get("uri"),
        resource_url=item.get("resource_url"),
        confidence=match_confidence(query, title),
    )
