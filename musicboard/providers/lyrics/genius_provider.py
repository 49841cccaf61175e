"""Genius lyrics provider.

Backs the ``genius-lyrics`` function with two actions, ``search`` and
``getSong``.  Genius does not serve lyrics text through its API, so the
page uses the song URL from the first search hit; the JSON is passed
through unchanged.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from musicboard.config.settings import Settings
from musicboard.utils.errors import InvalidActionError, NotConfiguredError, ValidationFailureError
from musicboard.utils.http import request_json
from musicboard.utils.logging import get_logger

_BASE_URL = "https://api.genius.com"
_PROVIDER = "genius"

# action -> required request parameter
_ACTIONS = {"search": "query", "getSong": "songId"}


class GeniusProvider:
    """Lyrics lookup backed by the Genius API (bearer token)."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._token = settings.genius_api_token
        self._http = http_client
        self._logger = get_logger(__name__)

    async def invoke(self, action: str | None, params: dict[str, Any]) -> dict[str, Any]:
        """Dispatch one ``{action, query?, songId?}`` request.

        Raises
        ------
        InvalidActionError
            Unknown *action*; checked before credentials or network.
        NotConfiguredError
            No Genius token is set.
        ValidationFailureError
            The action's parameter is missing.
        """
        if action not in _ACTIONS:
            raise InvalidActionError(message="Invalid action", provider_name=_PROVIDER)
        if not self.is_available():
            raise NotConfiguredError(
                message="Lyrics service not configured. Please add GENIUS_API_TOKEN to use this feature.",
                provider_name=_PROVIDER,
            )

        value = params.get(_ACTIONS[action])
        if value in (None, ""):
            raise ValidationFailureError(
                message=f"{_ACTIONS[action]} is required for {action}",
                provider_name=_PROVIDER,
            )

        if action == "search":
            return await self.search(str(value))
        return await self.get_song(str(value))

    async def search(self, query: str) -> dict[str, Any]:
        """Search songs; the hits are under ``response.hits``."""
        data = await self._get("/search", {"q": query})
        response = data.get("response")
        hits = response.get("hits") if isinstance(response, dict) else None
        self._logger.info(
            "genius_search_complete", query=query, hits=len(hits) if isinstance(hits, list) else 0
        )
        return data

    async def get_song(self, song_id: str) -> dict[str, Any]:
        """Fetch one song by Genius id."""
        data = await self._get(f"/songs/{quote(song_id, safe='')}", None)
        self._logger.info("genius_song_complete", song_id=song_id)
        return data

    def is_available(self) -> bool:
        return bool(self._token)

    def get_provider_name(self) -> str:
        return _PROVIDER

    async def _get(self, path: str, params: dict[str, str] | None) -> dict[str, Any]:
        data = await request_json(
            self._http,
            "GET",
            f"{_BASE_URL}{path}",
            provider_name=_PROVIDER,
            params=params,
            headers={"Authorization": f"Bearer {self._token}"},
        )
        return data if isinstance(data, dict) else {"response": data}
