"""Media service domain models -- re-exports all public model classes.

Import from ``media_service.models`` rather than the individual submodules:
    - movie.py   -- MovieRecord, its image/video sub-resources, SearchPage
    - results.py -- Found / NotFound lookup outcome variants
"""

from __future__ import annotations

from media_service.models.movie import (
    EnrichmentVideo,
    Genre,
    ImageData,
    ImageSet,
    MovieRecord,
    ProductionCompany,
    ProductionCountry,
    SearchPage,
    SpokenLanguage,
    Video,
    VideoList,
)
from media_service.models.results import Found, MovieLookup, NotFound

__all__ = [
    "EnrichmentVideo",
    "Found",
    "Genre",
    "ImageData",
    "ImageSet",
    "MovieLookup",
    "MovieRecord",
    "NotFound",
    "ProductionCompany",
    "ProductionCountry",
    "SearchPage",
    "SpokenLanguage",
    "Video",
    "VideoList",
]
