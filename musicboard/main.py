"""Musicboard FastAPI application entry point.

Wires together all providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml``, configures
structured logging, and mounts two routers: the function endpoints the
pages call for upstream data (``/functions/v1``) and the store endpoints
for ratings, reviews, boards, lists and profiles (``/api/v1``).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from musicboard.api.function_routes import router as function_router
from musicboard.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from musicboard.api.routes import router as api_router
from musicboard.config.loader import load_config
from musicboard.config.settings import Settings
from musicboard.interfaces.llm_provider import ILLMProvider
from musicboard.providers.boards.sqlite_board_provider import SQLiteBoardProvider
from musicboard.providers.cache.memory_cache import MemoryCacheProvider
from musicboard.providers.catalog.audiodb_provider import AudioDBProvider
from musicboard.providers.catalog.spotify_provider import SpotifyProvider
from musicboard.providers.events.bandsintown_provider import BandsintownProvider
from musicboard.providers.listen_later.sqlite_listen_later_provider import SQLiteListenLaterProvider
from musicboard.providers.lists.sqlite_list_provider import SQLiteListProvider
from musicboard.providers.llm.anthropic_provider import AnthropicLLMProvider
from musicboard.providers.llm.openai_provider import OpenAILLMProvider
from musicboard.providers.lyrics.genius_provider import GeniusProvider
from musicboard.providers.profiles.sqlite_profile_provider import SQLiteProfileProvider
from musicboard.providers.ratings.sqlite_rating_provider import SQLiteRatingProvider
from musicboard.providers.vinyl.discogs_vinyl_provider import DiscogsVinylProvider
from musicboard.services.board_service import BoardService
from musicboard.services.chat_service import SYSTEM_PROMPT, MusicChatService
from musicboard.services.list_service import ListService
from musicboard.services.listen_later_service import ListenLaterService
from musicboard.services.rating_service import RatingService
from musicboard.utils.logging import configure_logging, get_logger

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# LLM provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider | None:
    """Select the chat model based on configured API keys.

    Priority order: OpenAI-compatible gateway -> Anthropic.  Returns
    ``None`` when neither key is set; the chat function then answers
    with a "not configured" error.
    """
    if app_settings.llm_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    return None


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    config = load_config(settings=app_settings)
    catalog_cfg = config.get("catalog", {})
    vinyl_cfg = config.get("vinyl", {})
    feed_cfg = config.get("feed", {})
    chat_cfg = config.get("chat", {})

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.upstream_timeout)

    token_cache = None
    if app_settings.token_cache_enabled:
        token_cache = MemoryCacheProvider(ttl=app_settings.token_cache_ttl)

    # -- Upstream adapters --
    audiodb_provider = AudioDBProvider(http_client=http_client)
    spotify_provider = SpotifyProvider(
        settings=app_settings,
        http_client=http_client,
        token_cache=token_cache,
        search_limit=catalog_cfg.get("search_limit", 20),
        new_releases_limit=catalog_cfg.get("new_releases_limit", 12),
    )
    bandsintown_provider = BandsintownProvider(settings=app_settings, http_client=http_client)
    discogs_provider = DiscogsVinylProvider(
        settings=app_settings,
        http_client=http_client,
        per_page=vinyl_cfg.get("per_page", 10),
        max_results=vinyl_cfg.get("max_results", 5),
    )
    genius_provider = GeniusProvider(settings=app_settings, http_client=http_client)

    # -- LLM --
    llm_provider = _build_llm_provider(app_settings)
    chat_service = MusicChatService(
        llm_provider,
        temperature=chat_cfg.get("temperature", 0.7),
        max_tokens=chat_cfg.get("max_tokens", 1500),
        system_prompt=chat_cfg.get("system_prompt") or SYSTEM_PROMPT,
    )

    # -- Stores (one SQLite file, one table set per provider) --
    db_path = app_settings.database_path
    rating_store = SQLiteRatingProvider(db_path=db_path)
    board_store = SQLiteBoardProvider(db_path=db_path)
    list_store = SQLiteListProvider(db_path=db_path)
    profile_store = SQLiteProfileProvider(db_path=db_path)
    listen_later_store = SQLiteListenLaterProvider(db_path=db_path)

    # -- Services --
    rating_service = RatingService(
        rating_store,
        profile_store=profile_store,
        raters_limit=feed_cfg.get("raters_limit", 10),
    )
    board_service = BoardService(board_store, page_size=feed_cfg.get("boards_page_size", 20))
    list_service = ListService(list_store, page_size=feed_cfg.get("lists_page_size", 20))
    listen_later_service = ListenLaterService(
        listen_later_store, page_size=feed_cfg.get("listen_later_page_size", 50)
    )

    return {
        "http_client": http_client,
        "token_cache": token_cache,
        "audiodb_provider": audiodb_provider,
        "spotify_provider": spotify_provider,
        "bandsintown_provider": bandsintown_provider,
        "discogs_provider": discogs_provider,
        "genius_provider": genius_provider,
        "llm_provider": llm_provider,
        "chat_service": chat_service,
        "rating_store": rating_store,
        "board_store": board_store,
        "list_store": list_store,
        "profile_store": profile_store,
        "listen_later_store": listen_later_store,
        "rating_service": rating_service,
        "board_service": board_service,
        "list_service": list_service,
        "listen_later_service": listen_later_service,
        "upstream_registry": app_settings.get_configured_upstreams(),
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    # Create tables on first run
    for store_key in ("rating_store", "board_store", "list_store", "profile_store", "listen_later_store"):
        await components[store_key].initialize()

    llm_provider = components["llm_provider"]
    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=settings.app_env,
        llm_provider=llm_provider.get_provider_name() if llm_provider else None,
        upstreams=components["upstream_registry"],
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Musicboard API",
        version=_VERSION,
        description=(
            "Rate and review albums and tracks, curate boards and lists, and "
            "discover music through catalog, vinyl, events and lyrics lookups "
            "and an AI recommender."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.get_cors_origins())

    # -- Routes --
    application.include_router(function_router)
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "musicboard.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
