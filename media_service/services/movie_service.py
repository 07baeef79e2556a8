"""Movie aggregation service: catalog lookup plus optional video enrichment.

Data flow for ``get``:

  1. VALIDATE  -- reject a blank id, or an enrichment limit below 1 when
                  enrichment is requested, before any network call.
  2. CORE      -- ``catalog.fetch_movie``.  ``NotFound`` is logged as a
                  warning and returned; errors are logged and re-raised.
  3. TITLE     -- a record without a title cannot be used as a search
                  key, so it is returned unenriched with a warning.
  4. ENRICH    -- only when the caller asked for it.  Enrichment was
                  requested explicitly, so its failure fails the request.
  5. RETURN    -- ``Found`` with a new record carrying the enrichment
                  videos; fetched records are never mutated.

The service holds no per-request state and is shared by every request.  It
adds logging with operation context; it never swallows or reclassifies an
upstream error.
"""

from __future__ import annotations

import structlog

from media_service.interfaces.catalog_provider import ICatalogProvider
from media_service.interfaces.enrichment_provider import IEnrichmentProvider
from media_service.models.movie import SearchPage
from media_service.models.results import Found, MovieLookup, NotFound
from media_service.utils.errors import ConfigurationError, InvalidInputError, InvalidPageError
from media_service.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


class MovieService:
    """Aggregates catalog records with supplementary enrichment videos.

    Parameters
    ----------
    catalog:
        Authoritative movie catalog provider.
    enrichment:
        Secondary video provider, or ``None`` when none is configured.
        Requests that ask for enrichment then fail with
        :class:`ConfigurationError`.
    """

    def __init__(
        self,
        catalog: ICatalogProvider,
        enrichment: IEnrichmentProvider | None = None,
    ) -> None:
        self._catalog = catalog
        self._enrichment = enrichment

    async def get(
        self,
        movie_id: str,
        include_enrichment: bool,
        max_enrichment_results: int,
    ) -> MovieLookup:
        """Fetch one movie, enriching it with extra videos when requested."""
        if movie_id is None or not movie_id.strip():
            raise InvalidInputError(message="Movie ID cannot be null or empty.", field="movie_id")
        if include_enrichment and max_enrichment_results < 1:
            raise InvalidInputError(
                message=f"max_enrichment_results must be at least 1, got {max_enrichment_results}.",
                field="max_enrichment_results",
            )

        try:
            lookup = await self._catalog.fetch_movie(movie_id)
        except Exception as exc:
            logger.error(
                "movie_fetch_failed",
                operation="get",
                movie_id=movie_id,
                include_enrichment=include_enrichment,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        if isinstance(lookup, NotFound):
            logger.warning("movie_not_found", operation="get", movie_id=movie_id)
            return lookup

        record = lookup.record
        if not record.has_title:
            logger.warning("movie_missing_title", operation="get", movie_id=movie_id)
            return lookup

        if not include_enrichment:
            return lookup

        if self._enrichment is None:
            raise ConfigurationError(
                message="Enrichment was requested but no enrichment provider is configured."
            )

        try:
            videos = await self._enrichment.search_videos(record.title, max_enrichment_results)
        except Exception as exc:
            logger.error(
                "movie_enrichment_failed",
                operation="get",
                movie_id=movie_id,
                title=record.title,
                max_enrichment_results=max_enrichment_results,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        logger.info(
            "movie_enriched",
            movie_id=movie_id,
            provider=self._enrichment.get_provider_name(),
            enrichment_count=len(videos),
        )
        return Found(record=record.model_copy(update={"enrichment_videos": videos}))

    async def search(self, query: str, page: int) -> SearchPage:
        """Search the catalog; an empty page is a valid answer."""
        if query is None or not query.strip():
            raise InvalidInputError(message="Movie query cannot be null or empty.", field="query")
        if page < 1:
            raise InvalidPageError(message=f"Page must be at least 1, got {page}.")
        query = query.strip()

        try:
            result = await self._catalog.search_movies(query, page)
        except Exception as exc:
            logger.error(
                "movie_search_failed",
                operation="search",
                query=query,
                page=page,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        if result.is_empty:
            logger.warning("movie_search_empty", operation="search", query=query, page=page)
        return result

    @property
    def enrichment_available(self) -> bool:
        return self._enrichment is not None and self._enrichment.is_available()
