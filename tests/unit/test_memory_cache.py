"""Unit tests for MemoryCacheProvider, the upstream token cache."""

from __future__ import annotations

import time

import pytest

from musicboard.providers.cache.memory_cache import MemoryCacheProvider


class TestMemoryCacheProvider:
    @pytest.fixture()
    def cache(self) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=8, ttl=3000)

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("spotify") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("spotify", "token-1")
        assert await cache.get("spotify") == "token-1"
        assert await cache.exists("spotify") is True

    @pytest.mark.asyncio
    async def test_set_overwrites_existing(self, cache: MemoryCacheProvider) -> None:
        await cache.set("spotify", "old")
        await cache.set("spotify", "new", ttl=100)
        assert await cache.get("spotify") == "new"

    @pytest.mark.asyncio
    async def test_delete(self, cache: MemoryCacheProvider) -> None:
        await cache.set("spotify", "token")
        await cache.delete("spotify")
        assert await cache.exists("spotify") is False

    @pytest.mark.asyncio
    async def test_delete_missing_key_is_noop(self, cache: MemoryCacheProvider) -> None:
        await cache.delete("never-set")

    @pytest.mark.asyncio
    async def test_non_positive_ttl_is_not_stored(self, cache: MemoryCacheProvider) -> None:
        await cache.set("spotify", "token", ttl=0)
        await cache.set("genius", "token", ttl=-30)
        assert await cache.get("spotify") is None
        assert await cache.get("genius") is None

    @pytest.mark.asyncio
    async def test_entry_past_its_deadline_is_dropped(self, cache: MemoryCacheProvider) -> None:
        cache._cache["spotify"] = ("stale-token", time.monotonic() - 1)

        assert await cache.get("spotify") is None
        assert "spotify" not in cache._cache

    @pytest.mark.asyncio
    async def test_ttl_is_capped_by_default(self, cache: MemoryCacheProvider) -> None:
        before = time.monotonic()
        await cache.set("spotify", "token", ttl=10_000)
        _, deadline = cache._cache["spotify"]
        assert deadline <= time.monotonic() + 3000
        assert deadline >= before + 3000 - 1
