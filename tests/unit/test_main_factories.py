"""Unit tests for the factory functions in musicboard/main.py.

Covers chat-model selection, the full component assembly and the app
factory's route table; nothing here touches the network.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI

from musicboard.main import _build_all, _build_llm_provider, create_app
from musicboard.providers.llm.anthropic_provider import AnthropicLLMProvider
from musicboard.providers.llm.openai_provider import OpenAILLMProvider
from tests.conftest import make_settings

# ======================================================================
# _build_llm_provider
# ======================================================================


class TestBuildLLMProvider:
    def test_openai_compatible_first(self) -> None:
        provider = _build_llm_provider(make_settings(llm_api_key="k", anthropic_api_key="a"))
        assert isinstance(provider, OpenAILLMProvider)

    def test_anthropic_fallback(self) -> None:
        provider = _build_llm_provider(make_settings(llm_api_key="", anthropic_api_key="a"))
        assert isinstance(provider, AnthropicLLMProvider)

    def test_none_without_keys(self) -> None:
        assert _build_llm_provider(make_settings(llm_api_key="", anthropic_api_key="")) is None


# ======================================================================
# _build_all
# ======================================================================


class TestBuildAll:
    @pytest.mark.asyncio
    async def test_components(self, tmp_path: Path) -> None:
        components = _build_all(make_settings(database_path=str(tmp_path / "mb.db")))
        try:
            for key in (
                "audiodb_provider",
                "spotify_provider",
                "bandsintown_provider",
                "discogs_provider",
                "genius_provider",
                "chat_service",
                "rating_service",
                "board_service",
                "list_service",
                "listen_later_service",
                "listen_later_store",
                "profile_store",
            ):
                assert components[key] is not None, key
            assert components["token_cache"] is not None
            assert components["upstream_registry"]["spotify"] is True
            assert components["chat_service"].is_available() is True
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    async def test_token_cache_can_be_disabled(self, tmp_path: Path) -> None:
        components = _build_all(
            make_settings(token_cache_enabled=False, database_path=str(tmp_path / "mb.db"))
        )
        try:
            assert components["token_cache"] is None
        finally:
            await components["http_client"].aclose()


# ======================================================================
# create_app
# ======================================================================


class TestCreateApp:
    def test_routes_mounted(self) -> None:
        app = create_app()
        paths = {route.path for route in app.routes}

        assert isinstance(app, FastAPI)
        assert "/functions/v1/spotify-search" in paths
        assert "/functions/v1/music-chat" in paths
        assert "/functions/v1/{function_name}" in paths
        assert "/api/v1/boards/{board_id}/like" in paths
        assert "/api/v1/lists/{list_id}/like" in paths
        assert "/api/v1/albums/{album_id}/raters" in paths
        assert "/api/v1/listen-later" in paths
        assert "/api/v1/listen-later/{album_id}" in paths
        assert "/api/v1/health" in paths
