"""Abstract base class for cache storage providers.

Defines the key-value contract behind the request cache.  Implementations
may keep entries in process memory or in a network store; the request cache
only relies on these four operations, so the backend can be swapped without
touching the aggregation logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for key-value cache storage.

    All operations are async to allow for network-backed stores without
    blocking the event loop.  Implementations must tolerate concurrent
    callers: two tasks writing the same key leave the last value stored.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise.
        """

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value.

        The entry expires after the provider's configured time-to-live.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry stored under *key* (no-op if absent)."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""
