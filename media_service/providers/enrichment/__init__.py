"""Enrichment providers (secondary video sources searched by title)."""

from media_service.providers.enrichment.youtube_provider import (
    ENRICHMENT_PAGE_SIZE_ADJUSTMENT,
    YouTubeEnrichmentProvider,
)

__all__ = ["ENRICHMENT_PAGE_SIZE_ADJUSTMENT", "YouTubeEnrichmentProvider"]
