"""Cache providers.

In-memory TTL cache that backs the request cache.  ``MemoryCacheProvider``
is fast but not shared across processes; for multi-worker deployments a
network-backed adapter implementing ``ICacheProvider`` can be swapped in
without changing any service code.
"""

from media_service.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
