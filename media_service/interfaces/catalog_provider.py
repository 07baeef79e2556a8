"""Abstract base class for movie catalog providers.

Defines the contract for the authoritative upstream source of movie core
records, image sets, and video sets (e.g. TMDb).  Implementations are
stateless wrappers over a shared HTTP client and may be shared by reference
across concurrent requests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from media_service.models.movie import SearchPage
from media_service.models.results import MovieLookup


class ICatalogProvider(ABC):
    """Contract for movie catalog services."""

    @abstractmethod
    async def fetch_movie(self, movie_id: str) -> MovieLookup:
        """Fetch one movie with its image and video sub-resources merged in.

        Parameters
        ----------
        movie_id:
            Provider movie identifier, or an external (IMDb) identifier the
            provider accepts in the same position.

        Returns
        -------
        Found or NotFound
            ``Found`` carries a record whose ``images`` and ``videos`` are
            both populated (possibly empty).  ``NotFound`` means the core
            record does not exist; no sub-resource call was made.

        Raises
        ------
        media_service.utils.errors.InvalidInputError
            If *movie_id* is blank.  No network call is made.
        media_service.utils.errors.UpstreamError
            If the core record or either sub-resource cannot be fetched
            or parsed.  Partial records are never returned.
        """

    @abstractmethod
    async def search_movies(self, query: str, page: int) -> SearchPage:
        """Search the catalog by free text.

        Parameters
        ----------
        query:
            Free-text search query.
        page:
            1-based page number.

        Returns
        -------
        SearchPage
            Matches for the page, without images or videos.  A provider
            "not found" yields an empty page rather than an error.

        Raises
        ------
        media_service.utils.errors.InvalidInputError
            If *query* is blank or *page* is below 1.
        media_service.utils.errors.UpstreamError
            On transport, status, or parsing failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this catalog provider, e.g. ``"tmdb"``."""
