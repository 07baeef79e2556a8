"""In-memory cache provider using cachetools.TTLCache.

Process-local and not persisted across restarts.  ``TTLCache`` itself is not
thread-safe, so every table operation runs under a ``threading.Lock``; the
lock is only ever held for a single dict operation, never across an await.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable

import structlog
from cachetools import TTLCache

from media_service.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """In-memory TTL cache backed by ``cachetools.TTLCache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    ttl:
        Time-to-live in seconds applied to every entry.
    timer:
        Monotonic clock used for expiry.  Tests inject a fake clock to
        step past the TTL without sleeping.
    """

    def __init__(
        self,
        max_size: int = 1024,
        ttl: float = 600,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._timer = timer
        self._lock = threading.Lock()
        self._cache: TTLCache[str, Any] = TTLCache(maxsize=max_size, ttl=ttl, timer=timer)

    @property
    def ttl(self) -> float:
        return self._ttl

    def now(self) -> float:
        """Current reading of the cache clock."""
        return self._timer()

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Retrieve the cached value for *key*, or ``None`` if missing/expired."""
        with self._lock:
            value = self._cache.get(key)
        if value is not None:
            logger.debug("cache_hit", key=key)
        else:
            logger.debug("cache_miss", key=key)
        return value

    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, restarting its TTL."""
        with self._lock:
            self._cache[key] = value
        logger.debug("cache_set", key=key, ttl=self._ttl)

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        with self._lock:
            self._cache.pop(key, None)
        logger.debug("cache_delete", key=key)

    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)
