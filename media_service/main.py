"""Media service FastAPI application entry point.

Wires providers, services, and routes via dependency injection.  Loads
configuration from ``.env`` and ``config/config.yaml``, configures structured
logging, and builds one process-wide request cache that lives on
``app.state`` for the lifetime of the process.

Component graph built by :func:`build_components`:

    httpx.AsyncClient (TMDb auth)    -> ResilientHttpClient -> TMDbCatalogProvider
    httpx.AsyncClient (YouTube)      -> ResilientHttpClient -> YouTubeEnrichmentProvider
    TMDbCatalogProvider + YouTube    -> MovieService
    MemoryCacheProvider              -> RequestCache
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from media_service import __version__
from media_service.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from media_service.api.routes import router as api_router
from media_service.config.loader import load_config
from media_service.config.settings import Settings
from media_service.providers.cache.memory_cache import MemoryCacheProvider
from media_service.providers.catalog.tmdb_provider import TMDbCatalogProvider
from media_service.providers.enrichment.youtube_provider import YouTubeEnrichmentProvider
from media_service.providers.http.transport import ResilientHttpClient
from media_service.services.movie_service import MovieService
from media_service.services.request_cache import RequestCache
from media_service.utils.errors import ConfigurationError
from media_service.utils.logging import configure_logging, get_logger


settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------


def _build_catalog_http_client(app_settings: Settings) -> httpx.AsyncClient:
    """Create the TMDb client with credentials attached.

    A bearer token (TMDb v4 read access token) is preferred; otherwise the
    v3 API key travels as the ``api_key`` query parameter on every call.
    """
    if not app_settings.has_catalog_credentials():
        raise ConfigurationError(
            message="TMDB_BEARER_TOKEN or TMDB_API_KEY must be configured.",
            provider_name="tmdb",
        )

    headers = {"Accept": "application/json"}
    params: dict[str, str] = {}
    if app_settings.tmdb_bearer_token:
        headers["Authorization"] = f"Bearer {app_settings.tmdb_bearer_token}"
    else:
        params["api_key"] = app_settings.tmdb_api_key

    return httpx.AsyncClient(
        base_url=app_settings.tmdb_base_url,
        headers=headers,
        params=params,
        timeout=app_settings.http_timeout_seconds,
    )


def _build_enrichment_http_client(app_settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=app_settings.youtube_base_url,
        headers={
            "Accept": "application/json",
            "User-Agent": app_settings.youtube_application_name,
        },
        timeout=app_settings.http_timeout_seconds,
    )


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_components(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    catalog_http = _build_catalog_http_client(app_settings)
    catalog = TMDbCatalogProvider(
        transport=ResilientHttpClient(
            catalog_http,
            provider_name="tmdb",
            max_retries=app_settings.http_max_retries,
            backoff_base=app_settings.http_backoff_seconds,
        )
    )

    http_clients = [catalog_http]
    enrichment: YouTubeEnrichmentProvider | None = None
    if app_settings.has_enrichment_credentials():
        enrichment_http = _build_enrichment_http_client(app_settings)
        http_clients.append(enrichment_http)
        enrichment = YouTubeEnrichmentProvider(
            transport=ResilientHttpClient(
                enrichment_http,
                provider_name="youtube",
                max_retries=app_settings.http_max_retries,
                backoff_base=app_settings.http_backoff_seconds,
            ),
            api_key=app_settings.youtube_api_key,
        )
    else:
        _logger.warning(
            "enrichment_provider_disabled",
            msg="YOUTUBE_API_KEY is not set; requests asking for enrichment will fail.",
        )

    movie_service = MovieService(catalog=catalog, enrichment=enrichment)

    cache_store = MemoryCacheProvider(
        max_size=app_settings.cache_max_size,
        ttl=app_settings.cache_ttl_seconds,
    )
    request_cache = RequestCache(
        store=cache_store,
        ttl_seconds=app_settings.cache_ttl_seconds,
        clock=cache_store.now,
    )

    provider_registry: dict[str, bool] = {
        "catalog": True,
        "enrichment": enrichment is not None,
        "cache": True,
    }

    return {
        "http_clients": http_clients,
        "movie_service": movie_service,
        "request_cache": request_cache,
        "provider_registry": provider_registry,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Build all components on startup and close the HTTP clients on shutdown."""
    components = build_components(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        enrichment=components["provider_registry"]["enrichment"],
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )

    yield

    for http_client in components["http_clients"]:
        await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP clients closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Media Service API",
        version=__version__,
        description=(
            "Movie details from TMDb (https://www.themoviedb.org/) with images and "
            "videos merged in, optionally enriched with extra videos found on "
            "YouTube by title, served behind a short-lived response cache."
        ),
        lifespan=_lifespan,
    )

    # Last added = first executed.
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=config.get("cors", {}).get("allowed_origins"))

    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "media_service.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
