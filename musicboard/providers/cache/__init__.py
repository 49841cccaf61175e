"""Token cache implementations."""

from musicboard.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
