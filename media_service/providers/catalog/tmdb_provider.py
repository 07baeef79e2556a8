"""TMDb catalog provider implementing ICatalogProvider.

Stitches three dependent TMDb v3 calls into one movie record:

    GET movie/{id}          -> core record (404 = movie does not exist)
    GET movie/{id}/images   -> backdrops / posters / logos
    GET movie/{id}/videos   -> trailers, teasers, clips

and serves ``GET search/movie`` for paginated free-text search.  The
identifier may be a TMDb numeric id or an IMDb ``tt...`` id; TMDb resolves
both at ``movie/{id}``.

Outcome classification:

    core 404              -> NotFound, no sub-resource calls
    sub-resource 404      -> empty sub-resource (the movie still exists)
    search 404            -> empty SearchPage
    408 / 429 / 5xx       -> UpstreamTransientError (after transport retries)
    other non-2xx         -> UpstreamResponseError
    unparseable payload   -> UpstreamMalformedResponseError

Credentials (bearer token or ``api_key`` parameter) are attached to the
shared ``httpx.AsyncClient`` by the wiring layer, not here.
"""

from __future__ import annotations

from urllib.parse import quote

from media_service.interfaces.catalog_provider import ICatalogProvider
from media_service.models.movie import ImageSet, MovieRecord, SearchPage, Video, VideoList
from media_service.models.results import Found, MovieLookup, NotFound
from media_service.providers.http.transport import (
    ResilientHttpClient,
    parse_model,
    raise_for_upstream_status,
)
from media_service.utils.errors import InvalidInputError, InvalidPageError
from media_service.utils.logging import get_logger

_NOT_FOUND = 404


class TMDbCatalogProvider(ICatalogProvider):
    """Movie catalog provider backed by the TMDb v3 REST API.

    Parameters
    ----------
    transport:
        Resilient GET transport bound to the TMDb base URL.
    """

    def __init__(self, transport: ResilientHttpClient) -> None:
        self._transport = transport
        self._logger = get_logger(__name__)

    # -- ICatalogProvider implementation ---------------------------------------

    async def fetch_movie(self, movie_id: str) -> MovieLookup:
        """Fetch the core record, then its images and videos."""
        if movie_id is None or not movie_id.strip():
            raise InvalidInputError(
                message="Movie ID cannot be null or empty.",
                provider_name=self.get_provider_name(),
                field="movie_id",
            )

        movie_id = movie_id.strip()
        base_path = f"movie/{quote(movie_id, safe='')}"

        response = await self._transport.get(base_path, resource="movie")
        if response.status_code == _NOT_FOUND:
            self._logger.info("tmdb_movie_not_found", movie_id=movie_id)
            return NotFound(movie_id=movie_id)
        raise_for_upstream_status(response, self.get_provider_name(), "movie", base_path)
        record = parse_model(response, MovieRecord, self.get_provider_name(), "movie", base_path)

        # Sequential: a cancelled request issues no further calls.
        images = await self._fetch_images(base_path)
        videos = await self._fetch_videos(base_path)

        self._logger.info(
            "tmdb_movie_fetched",
            movie_id=movie_id,
            image_count=images.total,
            video_count=len(videos),
        )
        return Found(record=record.model_copy(update={"images": images, "videos": videos}))

    async def search_movies(self, query: str, page: int) -> SearchPage:
        """Search TMDb movies by *query*, returning one page of results."""
        if query is None or not query.strip():
            raise InvalidInputError(
                message="Movie query cannot be null or empty.",
                provider_name=self.get_provider_name(),
                field="query",
            )
        if page < 1:
            raise InvalidPageError(
                message=f"Page must be at least 1, got {page}.",
                provider_name=self.get_provider_name(),
            )

        path = "search/movie"
        # httpx percent-encodes the query string; passing the raw text keeps
        # it encoded exactly once.
        response = await self._transport.get(
            path,
            params={"query": query, "page": page},
            resource="search",
        )
        if response.status_code == _NOT_FOUND:
            self._logger.info("tmdb_search_not_found", query=query, page=page)
            return SearchPage.empty(page)
        raise_for_upstream_status(response, self.get_provider_name(), "search", path)
        result = parse_model(response, SearchPage, self.get_provider_name(), "search", path)

        self._logger.info(
            "tmdb_search_complete",
            query=query,
            page=result.page,
            result_count=len(result.results),
            total_results=result.total_results,
        )
        return result

    def get_provider_name(self) -> str:
        """Return ``'tmdb'``."""
        return "tmdb"

    # -- Sub-resources -------------------------------------------------------

    async def _fetch_images(self, base_path: str) -> ImageSet:
        path = f"{base_path}/images"
        response = await self._transport.get(path, resource="images")
        if response.status_code == _NOT_FOUND:
            self._logger.debug("tmdb_images_missing", path=path)
            return ImageSet()
        raise_for_upstream_status(response, self.get_provider_name(), "images", path)
        return parse_model(response, ImageSet, self.get_provider_name(), "images", path)

    async def _fetch_videos(self, base_path: str) -> list[Video]:
        path = f"{base_path}/videos"
        response = await self._transport.get(path, resource="videos")
        if response.status_code == _NOT_FOUND:
            self._logger.debug("tmdb_videos_missing", path=path)
            return []
        raise_for_upstream_status(response, self.get_provider_name(), "videos", path)
        return parse_model(response, VideoList, self.get_provider_name(), "videos", path).results
