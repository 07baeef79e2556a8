"""Application services: movie aggregation and the request cache in front of it."""

from media_service.services.movie_service import MovieService
from media_service.services.request_cache import (
    CacheEntry,
    RequestCache,
    movie_signature,
    search_signature,
)

__all__ = [
    "CacheEntry",
    "MovieService",
    "RequestCache",
    "movie_signature",
    "search_signature",
]
