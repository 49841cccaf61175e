"""In-memory token cache built on cachetools.TTLCache.

``TTLCache`` expires every entry after the same cache-wide TTL, but a
client-credential token has its own lifetime (``expires_in``).  Each
entry therefore stores its own deadline next to the value; whichever of
the two expiries comes first wins.
"""

from __future__ import annotations

import time
from typing import Any

import structlog
from cachetools import TTLCache

from musicboard.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """Process-local TTL cache.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used one is
        evicted.  A handful of upstream services never gets close.
    ttl:
        Default and maximum time-to-live in seconds.
    """

    def __init__(self, max_size: int = 32, ttl: int = 3000) -> None:
        self._default_ttl = ttl
        self._cache: TTLCache[str, tuple[Any, float]] = TTLCache(maxsize=max_size, ttl=ttl)

    async def get(self, key: str) -> Any | None:
        """Return the value for *key*, or ``None`` if missing or past its deadline."""
        entry = self._cache.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key)
            return None
        value, deadline = entry
        if time.monotonic() >= deadline:
            self._cache.pop(key, None)
            logger.debug("cache_expired", key=key)
            return None
        logger.debug("cache_hit", key=key)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* for ``min(ttl, default ttl)`` seconds."""
        effective_ttl = self._default_ttl if ttl is None else min(ttl, self._default_ttl)
        if effective_ttl <= 0:
            return
        self._cache[key] = (value, time.monotonic() + effective_ttl)
        logger.debug("cache_set", key=key, ttl=effective_ttl)

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        self._cache.pop(key, None)
        logger.debug("cache_delete", key=key)

    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
        return await self.get(key) is not None
