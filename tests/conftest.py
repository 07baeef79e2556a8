"""Shared pytest fixtures for the media service test suite."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from media_service.providers.http.transport import ResilientHttpClient

CATALOG_BASE_URL = "https://api.tmdb.test/3/"
ENRICHMENT_BASE_URL = "https://youtube.test/youtube/v3/"


# ---------------------------------------------------------------------------
# Upstream payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def movie_payload() -> dict[str, Any]:
    """Core TMDb record for The Matrix."""
    return {
        "id": 603,
        "imdb_id": "tt0133093",
        "title": "The Matrix",
        "original_title": "The Matrix",
        "original_language": "en",
        "overview": "Set in the 22nd century, The Matrix tells the story of a computer hacker...",
        "tagline": "Welcome to the Real World.",
        "release_date": "1999-03-30",
        "runtime": 136,
        "status": "Released",
        "adult": False,
        "budget": 63000000,
        "revenue": 463517383,
        "popularity": 79.3,
        "vote_average": 8.2,
        "vote_count": 24000,
        "poster_path": "/f89U3ADr1oiB1s9GkdPOEpXUk5H.jpg",
        "backdrop_path": "/fNG7i7RqMErkcqhohV2a6cV1Ehy.jpg",
        "genres": [{"id": 28, "name": "Action"}, {"id": 878, "name": "Science Fiction"}],
        "production_companies": [
            {"id": 79, "name": "Village Roadshow Pictures", "logo_path": None, "origin_country": "US"},
        ],
        "production_countries": [{"iso_3166_1": "US", "name": "United States of America"}],
        "spoken_languages": [{"iso_639_1": "en", "english_name": "English", "name": "English"}],
    }


@pytest.fixture
def images_payload() -> dict[str, Any]:
    return {
        "id": 603,
        "backdrops": [
            {"aspect_ratio": 1.778, "width": 1920, "height": 1080, "file_path": "/backdrop1.jpg"},
        ],
        "posters": [
            {"aspect_ratio": 0.667, "width": 1000, "height": 1500, "file_path": "/poster1.jpg"},
            {"aspect_ratio": 0.667, "width": 1000, "height": 1500, "file_path": "/poster2.jpg"},
        ],
        "logos": [],
    }


@pytest.fixture
def videos_payload() -> dict[str, Any]:
    return {
        "id": 603,
        "results": [
            {
                "id": "5c9294240e0a267cd516835f",
                "key": "vKQi3bBA1y8",
                "site": "YouTube",
                "name": "The Matrix (1999) Official Trailer",
                "type": "Trailer",
                "official": True,
            },
            {
                "id": "6102e2d7e5c5b4005d1f2ab4",
                "key": "123456",
                "site": "Vimeo",
                "name": "Behind the scenes",
                "type": "Featurette",
                "official": False,
            },
        ],
    }


@pytest.fixture
def search_payload() -> dict[str, Any]:
    return {
        "page": 1,
        "results": [
            {"id": 603, "title": "The Matrix", "genre_ids": [28, 878], "release_date": "1999-03-30"},
            {"id": 604, "title": "The Matrix Reloaded", "genre_ids": [28], "release_date": "2003-05-15"},
        ],
        "total_pages": 1,
        "total_results": 2,
    }


def youtube_search_payload(count: int, title: str = "The Matrix") -> dict[str, Any]:
    """Build a YouTube ``search.list`` response with *count* video items."""
    return {
        "kind": "youtube#searchListResponse",
        "items": [
            {
                "kind": "youtube#searchResult",
                "id": {"kind": "youtube#video", "videoId": f"vid{index}"},
                "snippet": {
                    "title": f"{title} clip {index}",
                    "description": f"Clip number {index}",
                },
            }
            for index in range(count)
        ],
    }


# ---------------------------------------------------------------------------
# HTTP plumbing
# ---------------------------------------------------------------------------


class RecordingHandler:
    """``httpx.MockTransport`` handler that records every request it serves.

    *responder* receives the request and returns an ``httpx.Response`` or
    raises an ``httpx`` exception to simulate a network failure.
    """

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self._responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


def build_transport(
    handler: Callable[[httpx.Request], Any],
    base_url: str = CATALOG_BASE_URL,
    provider_name: str = "tmdb",
    max_retries: int = 3,
) -> ResilientHttpClient:
    """Wrap *handler* in a ResilientHttpClient that never sleeps between retries."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)
    return ResilientHttpClient(
        client,
        provider_name=provider_name,
        max_retries=max_retries,
        backoff_base=0,
    )


def route_by_path(routes: dict[str, httpx.Response]) -> Callable[[httpx.Request], httpx.Response]:
    """Answer each request from *routes* keyed by URL path; anything else is a 404."""

    def responder(request: httpx.Request) -> httpx.Response:
        template = routes.get(request.url.path)
        if template is None:
            return httpx.Response(404, json={"status_code": 34})
        # Fresh response per request; a retried route is served more than once.
        return httpx.Response(
            template.status_code,
            headers=template.headers,
            content=template.content,
        )

    return responder


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
