"""Abstract base class for the credential token cache.

Client-credential tokens (Spotify) are the only thing this service ever
caches; upstream data is always fetched fresh.  Implementations must
honour a per-entry time-to-live so a token is never served after the
upstream considers it expired.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for a small key-value cache with per-entry expiry.

    Operations are async so a shared network-backed cache could replace
    the in-process one without touching the adapters.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value under *key*, or ``None`` if missing or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key*.

        Parameters
        ----------
        key:
            Cache key; adapters use their provider name (``"spotify"``).
        value:
            The value to store.
        ttl:
            Seconds until the entry expires.  ``None`` falls back to the
            cache-wide default.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*; a no-op when absent."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
