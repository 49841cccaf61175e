"""Shared pytest fixtures for the Musicboard test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from musicboard.config.settings import Settings
from musicboard.models.ratings import Rating, TargetType
from musicboard.providers.boards.sqlite_board_provider import SQLiteBoardProvider
from musicboard.providers.listen_later.sqlite_listen_later_provider import SQLiteListenLaterProvider
from musicboard.providers.lists.sqlite_list_provider import SQLiteListProvider
from musicboard.providers.profiles.sqlite_profile_provider import SQLiteProfileProvider
from musicboard.providers.ratings.sqlite_rating_provider import SQLiteRatingProvider

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def make_settings(**overrides: Any) -> Settings:
    """Settings with every upstream configured, ignoring any local .env file."""
    defaults: dict[str, Any] = {
        "spotify_client_id": "spotify-id",
        "spotify_client_secret": "spotify-secret",
        "bandsintown_app_id": "test_app",
        "discogs_token": "discogs-token",
        "genius_api_token": "genius-token",
        "llm_api_key": "llm-key",
        "anthropic_api_key": "",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


# ---------------------------------------------------------------------------
# Upstream HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
async def mock_http() -> Any:
    """Factory for ``httpx.AsyncClient`` instances backed by a MockTransport.

    Every request the client sends is appended to ``factory.requests``.
    """
    clients: list[httpx.AsyncClient] = []
    requests: list[httpx.Request] = []

    def factory(handler: Handler) -> httpx.AsyncClient:
        def recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        clients.append(client)
        return client

    factory.requests = requests  # type: ignore[attr-defined]
    yield factory
    for client in clients:
        await client.aclose()


# ---------------------------------------------------------------------------
# SQLite stores
# ---------------------------------------------------------------------------


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "musicboard-test.db"


@pytest.fixture
async def rating_store(db_path: Path) -> SQLiteRatingProvider:
    store = SQLiteRatingProvider(db_path=db_path)
    await store.initialize()
    return store


@pytest.fixture
async def board_store(db_path: Path) -> SQLiteBoardProvider:
    store = SQLiteBoardProvider(db_path=db_path)
    await store.initialize()
    return store


@pytest.fixture
async def list_store(db_path: Path) -> SQLiteListProvider:
    store = SQLiteListProvider(db_path=db_path)
    await store.initialize()
    return store


@pytest.fixture
async def profile_store(db_path: Path) -> SQLiteProfileProvider:
    store = SQLiteProfileProvider(db_path=db_path)
    await store.initialize()
    return store


@pytest.fixture
async def listen_later_store(db_path: Path) -> SQLiteListenLaterProvider:
    store = SQLiteListenLaterProvider(db_path=db_path)
    await store.initialize()
    return store


# ---------------------------------------------------------------------------
# Model builders
# ---------------------------------------------------------------------------


def make_rating(
    user_id: str = "user-1",
    target_id: str = "album-1",
    rating: float = 4.0,
    target_type: TargetType = TargetType.ALBUM,
    **kwargs: Any,
) -> Rating:
    return Rating(user_id=user_id, target_id=target_id, target_type=target_type, rating=rating, **kwargs)
