"""Provider contracts (abstract base classes) for the media service."""

from media_service.interfaces.cache_provider import ICacheProvider
from media_service.interfaces.catalog_provider import ICatalogProvider
from media_service.interfaces.enrichment_provider import IEnrichmentProvider

__all__ = ["ICacheProvider", "ICatalogProvider", "IEnrichmentProvider"]
