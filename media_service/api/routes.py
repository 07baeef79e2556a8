"""FastAPI routes for the media service.

Route map (all prefixed with ``/api/v1``):

    Endpoint                 Method  Description
    ---------------------------------------------------------------
    /movies/search           GET     Paginated catalog search
    /movies/{movie_id}       GET     One movie + images/videos (+ enrichment)
    /health                  GET     Health check + provider status

``/movies/search`` is declared before ``/movies/{movie_id}`` so the literal
path wins over the path parameter.

Every movie/search request goes through the request cache first; only a
miss reaches the movie service.  ``refresh=true`` drops the cached answer
for that exact request before looking it up.  Service dependencies are
resolved from ``app.state`` via ``Depends`` using the ``Annotated`` pattern,
so tests can mount the router on an app with mocked state.

Error mapping lives in ``ErrorHandlingMiddleware``: invalid input -> 400,
upstream/configuration failures -> 500.  ``NotFound`` -> 404 is mapped here
because it is a value, not an exception.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request

from media_service import __version__
from media_service.api.schemas import ErrorResponse, HealthResponse
from media_service.models.movie import MovieRecord, SearchPage
from media_service.models.results import NotFound
from media_service.services.movie_service import MovieService
from media_service.services.request_cache import RequestCache, movie_signature, search_signature

router = APIRouter(prefix="/api/v1")

DEFAULT_MAX_ENRICHMENT_RESULTS = 10

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid identifier, query, or page"},
    500: {"model": ErrorResponse, "description": "Upstream provider failure"},
}


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_movie_service(request: Request) -> MovieService:
    """Return the movie aggregation service from application state."""
    return request.app.state.movie_service


def _get_request_cache(request: Request) -> RequestCache:
    """Return the process-wide request cache from application state."""
    return request.app.state.request_cache


MovieServiceDep = Annotated[MovieService, Depends(_get_movie_service)]
RequestCacheDep = Annotated[RequestCache, Depends(_get_request_cache)]


# ---------------------------------------------------------------------------
# Movie endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/movies/search",
    response_model=SearchPage,
    responses=_ERROR_RESPONSES,
    summary="Search movies by title text",
)
async def search_movies(
    service: MovieServiceDep,
    cache: RequestCacheDep,
    query: Annotated[str, Query(description="Free-text title query")] = "",
    page: Annotated[int, Query(description="1-based page number")] = 1,
    refresh: Annotated[bool, Query(description="Drop any cached answer first")] = False,
) -> SearchPage:
    """Return one page of catalog matches; no matches is a 200 with an empty page."""
    signature = search_signature(query, page)
    if refresh:
        await cache.invalidate(signature)
    return await cache.get_or_compute(signature, lambda: service.search(query, page))


@router.get(
    "/movies/{movie_id}",
    response_model=MovieRecord,
    responses={
        **_ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "No movie with this identifier"},
    },
    summary="Get a movie with images, videos, and optional extra videos",
)
async def get_movie(
    movie_id: Annotated[str, Path(description="TMDb id or IMDb tt-id")],
    service: MovieServiceDep,
    cache: RequestCacheDep,
    include_enrichment: Annotated[
        bool, Query(description="Search the enrichment provider by title")
    ] = True,
    max_enrichment_results: Annotated[
        int, Query(description="Upper bound on extra videos")
    ] = DEFAULT_MAX_ENRICHMENT_RESULTS,
    refresh: Annotated[bool, Query(description="Drop any cached answer first")] = False,
) -> MovieRecord:
    """Return the movie record, enriched when requested."""
    signature = movie_signature(movie_id, include_enrichment, max_enrichment_results)
    if refresh:
        await cache.invalidate(signature)
    lookup = await cache.get_or_compute(
        signature,
        lambda: service.get(movie_id, include_enrichment, max_enrichment_results),
    )

    if isinstance(lookup, NotFound):
        raise HTTPException(status_code=404, detail=f"No movie found with ID '{lookup.movie_id}'.")
    return lookup.record


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider configuration."""
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)
    service = getattr(request.app.state, "movie_service", None)
    if service is not None:
        providers["enrichment"] = service.enrichment_available

    cache = getattr(request.app.state, "request_cache", None)

    if providers.get("catalog", False) and providers.get("enrichment", False):
        status = "healthy"
    elif providers.get("catalog", False):
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=__version__,
        providers=providers,
        cache_ttl_seconds=cache.ttl_seconds if cache is not None else None,
    )
