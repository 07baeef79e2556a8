"""Movie domain models for the catalog and enrichment providers.

Defines Pydantic v2 models for a movie record, its image and video
sub-resources, secondary-provider enrichment videos, and paginated search
results.  All models are frozen; the aggregation layer derives new records
with ``model_copy(update=...)`` instead of mutating fetched ones.

The models validate provider JSON directly (``MovieRecord.model_validate``),
so field names follow the catalog provider's snake_case wire format.  Unknown
keys are ignored and missing collections default to empty.

Key relationships:
    - MovieRecord has one ImageSet, many Video and many EnrichmentVideo
    - SearchPage holds MovieRecords whose images/videos are never populated
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/original/"
_YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


def _none_to_empty_list(value: object) -> object:
    # Providers send ``null`` for collections they have nothing for.
    return [] if value is None else value


# ---------------------------------------------------------------------------
# Descriptive value objects embedded in the core record
# ---------------------------------------------------------------------------

class Genre(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    name: str | None = None


class ProductionCompany(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    name: str | None = None
    logo_path: str | None = None
    origin_country: str | None = None


class ProductionCountry(BaseModel):
    model_config = ConfigDict(frozen=True)

    iso_3166_1: str | None = None
    name: str | None = None


class SpokenLanguage(BaseModel):
    model_config = ConfigDict(frozen=True)

    iso_639_1: str | None = None
    english_name: str | None = None
    name: str | None = None


# ---------------------------------------------------------------------------
# Sub-resources fetched separately from the core record
# ---------------------------------------------------------------------------

class ImageData(BaseModel):
    """A single backdrop, poster, or logo descriptor."""

    model_config = ConfigDict(frozen=True)

    aspect_ratio: float = 0.0
    width: int = 0
    height: int = 0
    file_path: str | None = None     # relative path, e.g. "/abc123.jpg"
    iso_639_1: str | None = None
    vote_average: float | None = None
    vote_count: int | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def link(self) -> str | None:
        """Absolute URL of the original-size image, or ``None`` without a path."""
        if not self.file_path:
            return None
        return _IMAGE_BASE_URL + self.file_path.lstrip("/")


class ImageSet(BaseModel):
    """Ordered image collections for one movie.

    An empty ``ImageSet()`` is a valid answer: the movie exists but has no
    catalogued images.
    """

    model_config = ConfigDict(frozen=True)

    backdrops: list[ImageData] = Field(default_factory=list)
    posters: list[ImageData] = Field(default_factory=list)
    logos: list[ImageData] = Field(default_factory=list)

    @field_validator("backdrops", "posters", "logos", mode="before")
    @classmethod
    def null_collections_to_empty(cls, value: object) -> object:
        return _none_to_empty_list(value)

    @property
    def total(self) -> int:
        return len(self.backdrops) + len(self.posters) + len(self.logos)


class Video(BaseModel):
    """A trailer, teaser, or clip listed by the catalog provider."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    key: str | None = None           # provider-specific key (YouTube video id, etc.)
    site: str | None = None          # hosting site name, e.g. "YouTube"
    name: str | None = None
    type: str | None = None          # "Trailer", "Teaser", "Clip", ...
    official: bool = False
    published_at: str | None = None
    size: int | None = None
    iso_639_1: str | None = None
    iso_3166_1: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def link(self) -> str | None:
        """Watch URL for YouTube-hosted videos; other sites have no known URL scheme."""
        if not self.key or self.site != "YouTube":
            return None
        return _YOUTUBE_WATCH_URL + self.key


class VideoList(BaseModel):
    """Wire envelope of the videos sub-resource (``{"id": ..., "results": [...]}``)."""

    model_config = ConfigDict(frozen=True)

    results: list[Video] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def null_results_to_empty(cls, value: object) -> object:
        return _none_to_empty_list(value)


class EnrichmentVideo(BaseModel):
    """A supplementary video found by title search on the enrichment provider."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    description: str | None = None
    video_id: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def link(self) -> str | None:
        if not self.video_id:
            return None
        return _YOUTUBE_WATCH_URL + self.video_id


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

class MovieRecord(BaseModel):
    """A movie as returned by the catalog provider, plus merged sub-resources.

    ``images`` is ``None`` and ``videos`` empty on search results, which never
    fetch sub-resources.  A record returned by a single-movie fetch always has
    both set (possibly empty).  ``enrichment_videos`` is filled only when the
    caller asked for enrichment.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    imdb_id: str | None = None
    title: str | None = None
    original_title: str | None = None
    original_language: str | None = None
    overview: str | None = None
    tagline: str | None = None
    release_date: str | None = None
    runtime: int | None = None
    status: str | None = None
    homepage: str | None = None
    adult: bool = False
    budget: int = 0
    revenue: int = 0
    popularity: float | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    poster_path: str | None = None
    backdrop_path: str | None = None
    genres: list[Genre] = Field(default_factory=list)
    genre_ids: list[int] = Field(default_factory=list)   # search results carry ids only
    production_companies: list[ProductionCompany] = Field(default_factory=list)
    production_countries: list[ProductionCountry] = Field(default_factory=list)
    spoken_languages: list[SpokenLanguage] = Field(default_factory=list)

    images: ImageSet | None = None
    videos: list[Video] = Field(default_factory=list)
    enrichment_videos: list[EnrichmentVideo] = Field(default_factory=list)

    @field_validator(
        "genres",
        "genre_ids",
        "production_companies",
        "production_countries",
        "spoken_languages",
        "videos",
        "enrichment_videos",
        mode="before",
    )
    @classmethod
    def null_collections_to_empty(cls, value: object) -> object:
        return _none_to_empty_list(value)

    @property
    def has_title(self) -> bool:
        return bool(self.title and self.title.strip())


class SearchPage(BaseModel):
    """One page of catalog search results."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    results: list[MovieRecord] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0

    @field_validator("results", mode="before")
    @classmethod
    def null_results_to_empty(cls, value: object) -> object:
        return _none_to_empty_list(value)

    @classmethod
    def empty(cls, page: int) -> SearchPage:
        """A page with no matches, used when the provider reports none found."""
        return cls(page=page, results=[], total_pages=0, total_results=0)

    @property
    def is_empty(self) -> bool:
        return not self.results
