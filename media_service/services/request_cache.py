"""Request-scoped response cache in front of the movie service.

Maps a canonical request signature to the payload of a previously successful
computation for a fixed time-to-live.

    get_or_compute(signature, compute)
        hit  -> stored payload, ``compute`` is not called
        miss -> await compute(); store only if it returned; return payload

Successful answers are cached even when they are "negative" (a ``NotFound``
lookup or an empty ``SearchPage``).  Exceptions pass straight through and
are never stored, so the next identical request goes upstream again.

Signatures percent-encode every free-text component with no safe
characters, which keeps the ``:`` separator and ``%`` out of user input, and
include every parameter that changes the result.  Varying any one parameter
is therefore always a miss against entries stored for other values.

Concurrency: two tasks that miss on the same signature at once may both
compute.  Both results are valid and the cache keeps whichever was stored
last.  No lock is held while ``compute`` runs.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar
from urllib.parse import quote

import structlog

from media_service.interfaces.cache_provider import ICacheProvider
from media_service.utils.logging import get_logger

_T = TypeVar("_T")

DEFAULT_TTL_SECONDS = 600

logger: structlog.BoundLogger = get_logger(__name__)


def _encode(text: str) -> str:
    return quote(text.strip(), safe="")


def movie_signature(movie_id: str, include_enrichment: bool, max_enrichment_results: int) -> str:
    """Signature of a single-movie request.

    >>> movie_signature("603", True, 10)
    'movie:603:enrich:true:max:10'
    """
    enrich = "true" if include_enrichment else "false"
    return f"movie:{_encode(movie_id)}:enrich:{enrich}:max:{int(max_enrichment_results)}"


def search_signature(query: str, page: int) -> str:
    """Signature of a search request.

    >>> search_signature("the matrix", 2)
    'search:the%20matrix:page:2'
    """
    return f"search:{_encode(query)}:page:{int(page)}"


@dataclass(frozen=True)
class CacheEntry:
    """A stored result.  Created once on a miss and never mutated."""

    signature: str
    payload: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class RequestCache:
    """Memoizes successful request results per signature.

    Parameters
    ----------
    store:
        Backing key-value store.  It should expire entries on its own; the
        entry's ``expires_at`` is checked as well, so a store without TTL
        support still behaves correctly.
    ttl_seconds:
        Lifetime of each entry (default 10 minutes).
    clock:
        Time source for ``expires_at``.  Must be the same clock the store
        uses for its own expiry.
    """

    def __init__(
        self,
        store: ICacheProvider,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    async def get_or_compute(self, signature: str, compute: Callable[[], Awaitable[_T]]) -> _T:
        """Return the cached payload for *signature*, computing it on a miss."""
        entry = await self._store.get(signature)
        if isinstance(entry, CacheEntry) and not entry.is_expired(self._clock()):
            logger.debug("request_cache_hit", signature=signature)
            return entry.payload

        logger.debug("request_cache_miss", signature=signature)
        payload = await compute()

        await self._store.set(
            signature,
            CacheEntry(
                signature=signature,
                payload=payload,
                expires_at=self._clock() + self._ttl,
            ),
        )
        logger.debug("request_cache_store", signature=signature, ttl_seconds=self._ttl)
        return payload

    async def invalidate(self, signature: str) -> None:
        """Drop the entry for *signature* so the next request recomputes it."""
        await self._store.delete(signature)
        logger.info("request_cache_invalidated", signature=signature)
