"""Catalog providers (authoritative movie metadata source)."""

from media_service.providers.catalog.tmdb_provider import TMDbCatalogProvider

__all__ = ["TMDbCatalogProvider"]
