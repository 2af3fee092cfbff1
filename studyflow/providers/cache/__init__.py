"""Cache providers.

In-memory TTL cache used to avoid re-embedding identical search queries.
MemoryCacheProvider is not shared across processes; a Redis adapter
implementing ICacheProvider can replace it without touching services.
"""

from studyflow.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
