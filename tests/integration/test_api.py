"""Integration tests for the FastAPI endpoints using TestClient.

The real providers, service, and request cache are wired together; only the
network is replaced by ``httpx.MockTransport`` handlers.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from media_service.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from media_service.api.routes import router as api_router
from media_service.providers.cache.memory_cache import MemoryCacheProvider
from media_service.providers.catalog.tmdb_provider import TMDbCatalogProvider
from media_service.providers.enrichment.youtube_provider import YouTubeEnrichmentProvider
from media_service.services.movie_service import MovieService
from media_service.services.request_cache import RequestCache
from tests.conftest import (
    ENRICHMENT_BASE_URL,
    FakeClock,
    RecordingHandler,
    build_transport,
    route_by_path,
    youtube_search_payload,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _youtube_responder(request: httpx.Request) -> httpx.Response:
    # The live endpoint hands back one item more than maxResults.
    requested = int(request.url.params["maxResults"])
    return httpx.Response(200, json=youtube_search_payload(requested + 1))


def _create_test_app(
    catalog_handler: RecordingHandler,
    enrichment_handler: RecordingHandler | None = None,
    clock: FakeClock | None = None,
) -> FastAPI:
    """Create a FastAPI app with mocked upstream transports for testing."""
    clock = clock or FakeClock()

    catalog = TMDbCatalogProvider(transport=build_transport(catalog_handler, max_retries=1))
    enrichment = None
    if enrichment_handler is not None:
        enrichment = YouTubeEnrichmentProvider(
            transport=build_transport(
                enrichment_handler,
                base_url=ENRICHMENT_BASE_URL,
                provider_name="youtube",
                max_retries=1,
            ),
            api_key="yt-key",
        )

    store = MemoryCacheProvider(max_size=100, ttl=600, timer=clock)

    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    configure_cors(app)
    app.include_router(api_router)

    app.state.movie_service = MovieService(catalog=catalog, enrichment=enrichment)
    app.state.request_cache = RequestCache(store=store, ttl_seconds=600, clock=clock)
    app.state.provider_registry = {
        "catalog": True,
        "enrichment": enrichment is not None,
        "cache": True,
    }
    return app


@pytest.fixture
def catalog_routes(
    movie_payload: dict[str, Any],
    images_payload: dict[str, Any],
    videos_payload: dict[str, Any],
    search_payload: dict[str, Any],
) -> dict[str, httpx.Response]:
    return {
        "/3/movie/603": httpx.Response(200, json=movie_payload),
        "/3/movie/603/images": httpx.Response(200, json=images_payload),
        "/3/movie/603/videos": httpx.Response(200, json=videos_payload),
        "/3/search/movie": httpx.Response(200, json=search_payload),
    }


# ---------------------------------------------------------------------------
# GET /api/v1/movies/{movie_id}
# ---------------------------------------------------------------------------


class TestGetMovieEndpoint:
    def test_enriched_movie(self, catalog_routes: dict[str, httpx.Response]) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        enrichment_handler = RecordingHandler(_youtube_responder)
        client = TestClient(_create_test_app(catalog_handler, enrichment_handler))

        response = client.get(
            "/api/v1/movies/603",
            params={"include_enrichment": "true", "max_enrichment_results": 5},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 603
        assert body["title"] == "The Matrix"
        assert len(body["images"]["posters"]) == 2
        assert body["images"]["posters"][0]["link"].startswith("https://image.tmdb.org/t/p/original/")
        assert body["videos"][0]["link"] == "https://www.youtube.com/watch?v=vKQi3bBA1y8"
        assert 0 < len(body["enrichment_videos"]) <= 5
        assert body["enrichment_videos"][0]["link"] == "https://www.youtube.com/watch?v=vid0"

        search_request = enrichment_handler.requests[0]
        assert search_request.url.params["q"] == "The Matrix"
        assert search_request.url.params["maxResults"] == "4"

    def test_enrichment_defaults_on(self, catalog_routes: dict[str, httpx.Response]) -> None:
        enrichment_handler = RecordingHandler(_youtube_responder)
        client = TestClient(
            _create_test_app(RecordingHandler(route_by_path(catalog_routes)), enrichment_handler)
        )

        response = client.get("/api/v1/movies/603")

        assert response.status_code == 200
        assert len(response.json()["enrichment_videos"]) == 10
        assert enrichment_handler.requests[0].url.params["maxResults"] == "9"

    def test_enrichment_disabled(self, catalog_routes: dict[str, httpx.Response]) -> None:
        enrichment_handler = RecordingHandler(_youtube_responder)
        client = TestClient(
            _create_test_app(RecordingHandler(route_by_path(catalog_routes)), enrichment_handler)
        )

        response = client.get("/api/v1/movies/603", params={"include_enrichment": "false"})

        assert response.status_code == 200
        assert response.json()["enrichment_videos"] == []
        assert enrichment_handler.requests == []

    def test_unknown_movie_is_404(self) -> None:
        catalog_handler = RecordingHandler(lambda request: httpx.Response(404))
        client = TestClient(_create_test_app(catalog_handler))

        response = client.get("/api/v1/movies/999999999")

        assert response.status_code == 404
        assert "999999999" in response.json()["detail"]
        assert catalog_handler.paths == ["/3/movie/999999999"]

    def test_blank_id_is_400(self) -> None:
        catalog_handler = RecordingHandler(lambda request: httpx.Response(200, json={}))
        client = TestClient(_create_test_app(catalog_handler))

        response = client.get("/api/v1/movies/%20%20")

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidInputError"
        assert catalog_handler.requests == []

    def test_upstream_failure_is_500_with_generic_detail(self) -> None:
        catalog_handler = RecordingHandler(
            lambda request: httpx.Response(401, json={"status_message": "Invalid API key"})
        )
        client = TestClient(_create_test_app(catalog_handler))

        response = client.get("/api/v1/movies/603", params={"include_enrichment": "false"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "UpstreamResponseError"
        assert "Invalid API key" not in body["detail"]

    def test_enrichment_without_provider_is_500(
        self, catalog_routes: dict[str, httpx.Response]
    ) -> None:
        client = TestClient(_create_test_app(RecordingHandler(route_by_path(catalog_routes))))

        response = client.get("/api/v1/movies/603")

        assert response.status_code == 500
        assert response.json()["error"] == "ConfigurationError"

    def test_repeat_request_served_from_cache(
        self, catalog_routes: dict[str, httpx.Response]
    ) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        enrichment_handler = RecordingHandler(_youtube_responder)
        client = TestClient(_create_test_app(catalog_handler, enrichment_handler))

        first = client.get("/api/v1/movies/603", params={"max_enrichment_results": 3})
        second = client.get("/api/v1/movies/603", params={"max_enrichment_results": 3})

        assert first.json() == second.json()
        assert len(catalog_handler.requests) == 3
        assert len(enrichment_handler.requests) == 1

    def test_different_limit_is_a_cache_miss(
        self, catalog_routes: dict[str, httpx.Response]
    ) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        enrichment_handler = RecordingHandler(_youtube_responder)
        client = TestClient(_create_test_app(catalog_handler, enrichment_handler))

        client.get("/api/v1/movies/603", params={"max_enrichment_results": 3})
        response = client.get("/api/v1/movies/603", params={"max_enrichment_results": 6})

        assert len(response.json()["enrichment_videos"]) == 6
        assert len(enrichment_handler.requests) == 2

    def test_cache_expires_after_ttl(self, catalog_routes: dict[str, httpx.Response]) -> None:
        clock = FakeClock()
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        client = TestClient(_create_test_app(catalog_handler, clock=clock))

        client.get("/api/v1/movies/603", params={"include_enrichment": "false"})
        clock.advance(601)
        client.get("/api/v1/movies/603", params={"include_enrichment": "false"})

        assert len(catalog_handler.requests) == 6

    def test_failures_are_not_cached(self) -> None:
        catalog_handler = RecordingHandler(lambda request: httpx.Response(503))
        client = TestClient(_create_test_app(catalog_handler))

        client.get("/api/v1/movies/603", params={"include_enrichment": "false"})
        client.get("/api/v1/movies/603", params={"include_enrichment": "false"})

        # One retry per request, and the second request goes upstream again.
        assert len(catalog_handler.requests) == 4

    def test_enrichment_limit_below_one_is_400_without_upstream_calls(
        self, catalog_routes: dict[str, httpx.Response]
    ) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        enrichment_handler = RecordingHandler(_youtube_responder)
        client = TestClient(_create_test_app(catalog_handler, enrichment_handler))

        params = {"include_enrichment": "true", "max_enrichment_results": 0}
        responses = [client.get("/api/v1/movies/603", params=params) for _ in range(2)]

        assert [response.status_code for response in responses] == [400, 400]
        assert responses[0].json()["error"] == "InvalidInputError"
        assert catalog_handler.requests == []
        assert enrichment_handler.requests == []

    def test_refresh_bypasses_cached_answer(
        self, catalog_routes: dict[str, httpx.Response]
    ) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        client = TestClient(_create_test_app(catalog_handler))

        client.get("/api/v1/movies/603", params={"include_enrichment": "false"})
        client.get("/api/v1/movies/603", params={"include_enrichment": "false"})
        assert len(catalog_handler.requests) == 3

        response = client.get(
            "/api/v1/movies/603", params={"include_enrichment": "false", "refresh": "true"}
        )

        assert response.status_code == 200
        assert len(catalog_handler.requests) == 6

    def test_request_id_echoed(self, catalog_routes: dict[str, httpx.Response]) -> None:
        client = TestClient(_create_test_app(RecordingHandler(route_by_path(catalog_routes))))

        response = client.get(
            "/api/v1/movies/603",
            params={"include_enrichment": "false"},
            headers={"X-Request-ID": "req-123"},
        )

        assert response.headers["X-Request-ID"] == "req-123"


# ---------------------------------------------------------------------------
# GET /api/v1/movies/search
# ---------------------------------------------------------------------------


class TestSearchEndpoint:
    def test_search_results(self, catalog_routes: dict[str, httpx.Response]) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        client = TestClient(_create_test_app(catalog_handler))

        response = client.get("/api/v1/movies/search", params={"query": "matrix", "page": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["total_results"] == 2
        assert [movie["title"] for movie in body["results"]] == ["The Matrix", "The Matrix Reloaded"]
        assert catalog_handler.requests[0].url.params["query"] == "matrix"

    def test_query_is_trimmed_before_upstream(
        self, catalog_routes: dict[str, httpx.Response]
    ) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        client = TestClient(_create_test_app(catalog_handler))

        client.get("/api/v1/movies/search", params={"query": "  matrix  "})
        client.get("/api/v1/movies/search", params={"query": "matrix"})

        assert [request.url.params["query"] for request in catalog_handler.requests] == ["matrix"]

    def test_refresh_bypasses_cached_page(
        self, catalog_routes: dict[str, httpx.Response]
    ) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        client = TestClient(_create_test_app(catalog_handler))

        client.get("/api/v1/movies/search", params={"query": "matrix"})
        client.get("/api/v1/movies/search", params={"query": "matrix", "refresh": "true"})

        assert len(catalog_handler.requests) == 2

    def test_no_matches_is_empty_page(self) -> None:
        client = TestClient(_create_test_app(RecordingHandler(lambda request: httpx.Response(404))))

        response = client.get("/api/v1/movies/search", params={"query": "zzzz-nothing"})

        assert response.status_code == 200
        assert response.json() == {"page": 1, "results": [], "total_pages": 0, "total_results": 0}

    def test_blank_query_is_400(self) -> None:
        catalog_handler = RecordingHandler(lambda request: httpx.Response(200, json={}))
        client = TestClient(_create_test_app(catalog_handler))

        response = client.get("/api/v1/movies/search", params={"query": "   "})

        assert response.status_code == 400
        assert catalog_handler.requests == []

    def test_missing_query_is_400(self) -> None:
        client = TestClient(
            _create_test_app(RecordingHandler(lambda request: httpx.Response(200, json={})))
        )

        response = client.get("/api/v1/movies/search")

        assert response.status_code == 400

    def test_page_zero_is_400(self) -> None:
        client = TestClient(
            _create_test_app(RecordingHandler(lambda request: httpx.Response(200, json={})))
        )

        response = client.get("/api/v1/movies/search", params={"query": "matrix", "page": 0})

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidPageError"

    def test_pages_cached_separately(self, catalog_routes: dict[str, httpx.Response]) -> None:
        catalog_handler = RecordingHandler(route_by_path(catalog_routes))
        client = TestClient(_create_test_app(catalog_handler))

        client.get("/api/v1/movies/search", params={"query": "matrix", "page": 1})
        client.get("/api/v1/movies/search", params={"query": "matrix", "page": 1})
        client.get("/api/v1/movies/search", params={"query": "matrix", "page": 2})

        assert [request.url.params["page"] for request in catalog_handler.requests] == ["1", "2"]


# ---------------------------------------------------------------------------
# GET /api/v1/health
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    def test_healthy_with_both_providers(self) -> None:
        client = TestClient(
            _create_test_app(
                RecordingHandler(lambda request: httpx.Response(200)),
                RecordingHandler(_youtube_responder),
            )
        )

        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["providers"] == {"catalog": True, "enrichment": True, "cache": True}
        assert body["cache_ttl_seconds"] == 600

    def test_degraded_without_enrichment(self) -> None:
        client = TestClient(_create_test_app(RecordingHandler(lambda request: httpx.Response(200))))

        response = client.get("/api/v1/health")

        assert response.json()["status"] == "degraded"

    def test_enrichment_status_read_from_service(self) -> None:
        app = _create_test_app(RecordingHandler(lambda request: httpx.Response(200)))
        app.state.provider_registry = {"catalog": True, "enrichment": True, "cache": True}
        client = TestClient(app)

        body = client.get("/api/v1/health").json()

        assert body["providers"]["enrichment"] is False
        assert body["status"] == "degraded"
