"""YouTube Data API v3 enrichment provider implementing IEnrichmentProvider.

Searches ``GET search?part=snippet&q=<title>&maxResults=<n>&key=<api key>``
and maps each result's snippet title/description and ``id.videoId`` to an
:class:`EnrichmentVideo`.  Results without a ``videoId`` (channels,
playlists) are kept with ``video_id=None`` so the provider's rank order is
preserved.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from media_service.interfaces.enrichment_provider import IEnrichmentProvider
from media_service.models.movie import EnrichmentVideo
from media_service.providers.http.transport import (
    ResilientHttpClient,
    parse_model,
    raise_for_upstream_status,
)
from media_service.utils.errors import InvalidInputError
from media_service.utils.logging import get_logger

# The provider is asked for one item fewer than the caller's limit to
# compensate for its page-size semantics returning one extra item.
# TODO: confirm against the live search endpoint; drop the adjustment if
# maxResults turns out to be exact.
ENRICHMENT_PAGE_SIZE_ADJUSTMENT = 1

# Upper bound the search endpoint accepts for maxResults.
_PROVIDER_MAX_RESULTS = 50
_SEARCH_PATH = "search"


class _SearchResultId(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: str | None = None
    video_id: str | None = Field(default=None, alias="videoId")


class _SearchResultSnippet(BaseModel):
    title: str | None = None
    description: str | None = None


class _SearchResult(BaseModel):
    id: _SearchResultId = Field(default_factory=_SearchResultId)
    snippet: _SearchResultSnippet = Field(default_factory=_SearchResultSnippet)


class _SearchListResponse(BaseModel):
    items: list[_SearchResult] = Field(default_factory=list)


class YouTubeEnrichmentProvider(IEnrichmentProvider):
    """Enrichment provider backed by the YouTube Data API v3 search endpoint.

    Parameters
    ----------
    transport:
        Resilient GET transport bound to the YouTube API base URL.
    api_key:
        YouTube Data API key, sent as the ``key`` query parameter.
    """

    def __init__(self, transport: ResilientHttpClient, api_key: str) -> None:
        self._transport = transport
        self._api_key = api_key
        self._logger = get_logger(__name__)

    async def search_videos(self, title: str, max_results: int) -> list[EnrichmentVideo]:
        """Search YouTube for *title*, returning at most *max_results* videos."""
        if title is None or not title.strip():
            raise InvalidInputError(
                message="Video search title cannot be null or empty.",
                provider_name=self.get_provider_name(),
                field="title",
            )
        if max_results < 1:
            raise InvalidInputError(
                message=f"max_results must be at least 1, got {max_results}.",
                provider_name=self.get_provider_name(),
                field="max_results",
            )

        requested = self.requested_page_size(max_results)
        params: dict[str, Any] = {
            "part": "snippet",
            "q": title,
            "maxResults": requested,
            "key": self._api_key,
        }
        response = await self._transport.get(_SEARCH_PATH, params=params, resource="enrichment")
        raise_for_upstream_status(response, self.get_provider_name(), "enrichment", _SEARCH_PATH)
        payload = parse_model(
            response,
            _SearchListResponse,
            self.get_provider_name(),
            "enrichment",
            _SEARCH_PATH,
        )

        videos = [
            EnrichmentVideo(
                title=item.snippet.title,
                description=item.snippet.description,
                video_id=item.id.video_id,
            )
            for item in payload.items[:max_results]
        ]

        self._logger.info(
            "youtube_search_complete",
            title=title,
            max_results=max_results,
            requested=requested,
            result_count=len(videos),
        )
        return videos

    @staticmethod
    def requested_page_size(max_results: int) -> int:
        """Return the ``maxResults`` value sent upstream for a caller limit."""
        return max(0, min(max_results - ENRICHMENT_PAGE_SIZE_ADJUSTMENT, _PROVIDER_MAX_RESULTS))

    def get_provider_name(self) -> str:
        """Return ``'youtube'``."""
        return "youtube"

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)
