"""Bandsintown concert listings provider.

Backs the ``bandsintown-api`` function with two actions:

- ``getArtist``  -> ``/artists/{name}``         (artist profile, passthrough)
- ``getEvents``  -> ``/artists/{name}/events``  (wrapped as ``{"events": [...]}``)

Bandsintown identifies callers by an ``app_id`` query parameter rather
than a secret, so the provider is available whenever an app id is set.

Unknown artists come back either as HTTP 404 or as an HTTP 200 body of
the form ``{"error": "[NotFound] The artist was not found"}``.  Both are
raised as :class:`NotFoundError` so the route can answer
``{"error": "Artist not found"}`` with status 404.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from musicboard.config.settings import Settings
from musicboard.utils.errors import (
    InvalidActionError,
    NotConfiguredError,
    NotFoundError,
    UpstreamError,
    ValidationFailureError,
)
from musicboard.utils.http import request_json

logger = structlog.get_logger(logger_name=__name__)

_BASE_URL = "https://rest.bandsintown.com"
_PROVIDER = "bandsintown"
_ACTIONS = ("getArtist", "getEvents")


class BandsintownProvider:
    """Event provider backed by the Bandsintown REST API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._app_id = settings.bandsintown_app_id
        self._http = http_client

    async def invoke(self, action: str | None, params: dict[str, Any]) -> dict[str, Any]:
        """Dispatch one ``{action, artistName, dateRange?}`` request.

        Raises
        ------
        InvalidActionError
            Unknown *action*, raised before any network call.
        ValidationFailureError
            ``artistName`` missing.
        """
        if action not in _ACTIONS:
            raise InvalidActionError(message="Invalid action", provider_name=_PROVIDER)

        artist_name = str(params.get("artistName") or "").strip()
        if not artist_name:
            raise ValidationFailureError(message="artistName is required", provider_name=_PROVIDER)

        if action == "getArtist":
            return await self.get_artist(artist_name)
        events = await self.get_events(artist_name, params.get("dateRange"))
        return {"events": events}

    async def get_artist(self, artist_name: str) -> dict[str, Any]:
        """Return the artist profile (name, image, tracker and event counts)."""
        data = await self._get(f"/artists/{quote(artist_name, safe='')}", {})
        if not isinstance(data, dict):
            raise UpstreamError(message="Unexpected artist payload", provider_name=_PROVIDER)
        logger.info("bandsintown_artist_complete", artist=artist_name)
        return data

    async def get_events(self, artist_name: str, date_range: str | None = None) -> list[dict[str, Any]]:
        """Return the artist's events.

        Parameters
        ----------
        date_range:
            Bandsintown ``date`` filter: ``"upcoming"``, ``"past"``, ``"all"``
            or ``"YYYY-MM-DD,YYYY-MM-DD"``.  Omitted means upcoming.
        """
        params = {"date": date_range} if date_range else {}
        data = await self._get(f"/artists/{quote(artist_name, safe='')}/events", params)
        if not isinstance(data, list):
            raise UpstreamError(message="Unexpected events payload", provider_name=_PROVIDER)
        events = [event for event in data if isinstance(event, dict)]
        logger.info("bandsintown_events_complete", artist=artist_name, events=len(events))
        return events

    def is_available(self) -> bool:
        return bool(self._app_id)

    def get_provider_name(self) -> str:
        return _PROVIDER

    async def _get(self, path: str, params: dict[str, str]) -> Any:
        if not self.is_available():
            raise NotConfiguredError(message="Bandsintown app id not configured", provider_name=_PROVIDER)

        try:
            data = await request_json(
                self._http,
                "GET",
                f"{_BASE_URL}{path}",
                provider_name=_PROVIDER,
                params={"app_id": self._app_id, **params},
            )
        except NotFoundError:
            logger.info("bandsintown_not_found", path=path)
            raise

        # In-band "not found" on a 200.
        if isinstance(data, dict) and "error" in data:
            logger.info("bandsintown_not_found", path=path, upstream_error=data["error"])
            raise NotFoundError(message="Artist not found", provider_name=_PROVIDER)
        return data
