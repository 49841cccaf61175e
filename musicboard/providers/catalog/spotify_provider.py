"""Spotify Web API catalog provider.

Backs three function endpoints: ``spotify-search``,
``spotify-recommendations`` (the new-releases shelf) and
``spotify-album-details``.  All three authenticate with the
client-credentials flow: client id and secret are exchanged for a bearer
token at ``accounts.spotify.com`` before the data call.

Token reuse
-----------
When a token cache is injected, the token is kept under the key
``"spotify"`` until shortly before Spotify's ``expires_in``
(:data:`_EXPIRY_MARGIN` seconds early) or the configured cache TTL,
whichever is sooner.  Without a cache every call exchanges a fresh token.

Shape checks
------------
Spotify items missing an ``id`` or ``name`` are skipped rather than
returned half-empty, and a missing result group becomes ``[]``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from musicboard.config.settings import Settings
from musicboard.interfaces.cache_provider import ICacheProvider
from musicboard.models.catalog import (
    AlbumDetail,
    AlbumSummary,
    AlbumTrack,
    ArtistSummary,
    CatalogSearchResults,
    TrackSummary,
)
from musicboard.utils.errors import (
    NotConfiguredError,
    NotFoundError,
    UpstreamAuthError,
    UpstreamError,
)
from musicboard.utils.http import request_json
from musicboard.utils.logging import get_logger

_TOKEN_URL = "https://accounts.spotify.com/api/token"
_API_URL = "https://api.spotify.com/v1"
_PROVIDER = "spotify"
_EXPIRY_MARGIN = 60
_DEFAULT_SEARCH_TYPES = "album,track,artist"

_M = TypeVar("_M", bound=BaseModel)


class SpotifyProvider:
    """Catalog provider backed by the Spotify Web API.

    Parameters
    ----------
    settings:
        Supplies the client id/secret and the token cache TTL.
    http_client:
        Shared ``httpx.AsyncClient`` owned by the application lifespan.
    token_cache:
        Optional cache for the bearer token.  ``None`` disables reuse.
    search_limit, new_releases_limit:
        Page sizes for search and the new-releases shelf.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        token_cache: ICacheProvider | None = None,
        search_limit: int = 20,
        new_releases_limit: int = 12,
    ) -> None:
        self._client_id = settings.spotify_client_id
        self._client_secret = settings.spotify_client_secret
        self._token_ttl = settings.token_cache_ttl
        self._http = http_client
        self._token_cache = token_cache
        self._search_limit = search_limit
        self._new_releases_limit = new_releases_limit
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def search(self, query: str, types: str = _DEFAULT_SEARCH_TYPES) -> CatalogSearchResults:
        """Search albums, tracks and artists.

        An upstream 404 yields empty result groups instead of an error.
        """
        token = await self._get_token()
        try:
            data = await request_json(
                self._http,
                "GET",
                f"{_API_URL}/search",
                provider_name=_PROVIDER,
                params={"q": query, "type": types or _DEFAULT_SEARCH_TYPES, "limit": self._search_limit},
                headers=_bearer(token),
            )
        except NotFoundError:
            self._logger.info("spotify_search_not_found", query=query)
            return CatalogSearchResults()

        results = CatalogSearchResults(
            albums=_collect(_items(data, "albums"), _album_summary),
            tracks=_collect(_items(data, "tracks"), _track_summary),
            artists=_collect(_items(data, "artists"), _artist_summary),
        )
        self._logger.info(
            "spotify_search_complete",
            query=query,
            albums=len(results.albums),
            tracks=len(results.tracks),
            artists=len(results.artists),
        )
        return results

    async def new_releases(self) -> list[AlbumSummary]:
        """Return the current new-releases shelf."""
        token = await self._get_token()
        data = await request_json(
            self._http,
            "GET",
            f"{_API_URL}/browse/new-releases",
            provider_name=_PROVIDER,
            params={"limit": self._new_releases_limit},
            headers=_bearer(token),
        )
        albums = _collect(_items(data, "albums"), _album_summary)
        self._logger.info("spotify_new_releases_complete", albums=len(albums))
        return albums

    async def album_details(self, album_id: str) -> AlbumDetail:
        """Return one album with its tracks and derived totals.

        Raises
        ------
        NotFoundError
            Spotify has no album with this id.
        """
        token = await self._get_token()
        data = await request_json(
            self._http,
            "GET",
            f"{_API_URL}/albums/{quote(album_id, safe='')}",
            provider_name=_PROVIDER,
            headers=_bearer(token),
        )
        if not isinstance(data, dict) or not data.get("id"):
            raise UpstreamError(
                message="Spotify returned an album without an id",
                provider_name=_PROVIDER,
            )

        detail = _album_detail(data)
        self._logger.info(
            "spotify_album_complete",
            album_id=album_id,
            tracks=len(detail.tracks),
            duration_ms=detail.duration,
        )
        return detail

    def is_available(self) -> bool:
        """Return ``True`` when both client id and secret are set."""
        return bool(self._client_id and self._client_secret)

    def get_provider_name(self) -> str:
        return _PROVIDER

    # ------------------------------------------------------------------
    # Token exchange
    # ------------------------------------------------------------------

    async def _get_token(self) -> str:
        """Return a bearer token, from the cache when one is still valid."""
        if not self.is_available():
            raise NotConfiguredError(message="Spotify API not configured", provider_name=_PROVIDER)

        if self._token_cache is not None:
            cached = await self._token_cache.get(_PROVIDER)
            if cached:
                return cached

        try:
            data = await request_json(
                self._http,
                "POST",
                _TOKEN_URL,
                provider_name=_PROVIDER,
                data={"grant_type": "client_credentials"},
                auth=(self._client_id, self._client_secret),
            )
        except UpstreamError as exc:
            self._logger.error("spotify_token_failed", error=str(exc))
            raise UpstreamAuthError(
                message="Failed to authenticate with Spotify",
                provider_name=_PROVIDER,
                status_code=exc.status_code,
            ) from exc
        except NotFoundError as exc:
            raise UpstreamAuthError(
                message="Failed to authenticate with Spotify",
                provider_name=_PROVIDER,
                status_code=404,
            ) from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise UpstreamAuthError(message="Failed to authenticate with Spotify", provider_name=_PROVIDER)

        if self._token_cache is not None:
            expires_in = int(data.get("expires_in") or 0)
            ttl = min(self._token_ttl, expires_in - _EXPIRY_MARGIN)
            if ttl > 0:
                await self._token_cache.set(_PROVIDER, token, ttl=ttl)

        self._logger.debug("spotify_token_issued")
        return token


# ----------------------------------------------------------------------
# Reshaping helpers
# ----------------------------------------------------------------------


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _items(data: Any, group: str) -> list[Any]:
    if not isinstance(data, dict):
        return []
    section = data.get(group)
    if not isinstance(section, dict):
        return []
    items = section.get("items")
    return items if isinstance(items, list) else []


def _collect(items: list[Any], build: Callable[[dict[str, Any]], _M]) -> list[_M]:
    return [build(item) for item in items if isinstance(item, dict) and item.get("id") and item.get("name")]


def _first_image(images: Any) -> str | None:
    if isinstance(images, list) and images and isinstance(images[0], dict):
        return images[0].get("url")
    return None


def _first_artist(artists: Any) -> str | None:
    if isinstance(artists, list) and artists and isinstance(artists[0], dict):
        return artists[0].get("name")
    return None


def _album_summary(item: dict[str, Any]) -> AlbumSummary:
    return AlbumSummary(
        id=item["id"],
        name=item["name"],
        artist=_first_artist(item.get("artists")),
        image=_first_image(item.get("images")),
        release_date=item.get("release_date"),
    )


def _track_summary(item: dict[str, Any]) -> TrackSummary:
    album = item.get("album") if isinstance(item.get("album"), dict) else {}
    return TrackSummary(
        id=item["id"],
        name=item["name"],
        artist=_first_artist(item.get("artists")),
        image=_first_image(album.get("images")),
        release_date=album.get("release_date"),
    )


def _artist_summary(item: dict[str, Any]) -> ArtistSummary:
    return ArtistSummary(id=item["id"], name=item["name"], image=_first_image(item.get("images")))


def _album_detail(data: dict[str, Any]) -> AlbumDetail:
    raw_tracks = _items(data, "tracks")
    tracks = [
        AlbumTrack(
            id=track["id"],
            name=track.get("name") or "",
            duration_ms=int(track.get("duration_ms") or 0),
            track_number=int(track.get("track_number") or 0),
            artists=[a.get("name", "") for a in track.get("artists") or [] if isinstance(a, dict)],
            explicit=bool(track.get("explicit")),
        )
        for track in raw_tracks
        if isinstance(track, dict) and track.get("id")
    ]
    artists = [a for a in data.get("artists") or [] if isinstance(a, dict)]

    return AlbumDetail(
        id=data["id"],
        name=data.get("name") or "",
        artist=_first_artist(artists) or "Unknown Artist",
        artists=artists,
        image=_first_image(data.get("images")) or "",
        release_date=data.get("release_date"),
        total_tracks=int(data.get("total_tracks") or len(tracks)),
        duration=sum(track.duration_ms for track in tracks),
        label=data.get("label"),
        type=data.get("album_type"),
        spotify_url=(data.get("external_urls") or {}).get("spotify"),
        popularity=data.get("popularity"),
        genres=list(data.get("genres") or []),
        copyrights=[c for c in data.get("copyrights") or [] if isinstance(c, dict)],
        available_markets=len(data.get("available_markets") or []),
        tracks=tracks,
    )
