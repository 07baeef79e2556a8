"""Abstract base class for supplementary video (enrichment) providers.

Defines the contract for searching a secondary video source by free-text
title, e.g. YouTube.  The adapter pattern keeps the aggregation service
independent of which provider is wired in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from media_service.models.movie import EnrichmentVideo


class IEnrichmentProvider(ABC):
    """Contract for title-keyed video search services."""

    @abstractmethod
    async def search_videos(self, title: str, max_results: int) -> list[EnrichmentVideo]:
        """Search for videos matching *title*.

        Parameters
        ----------
        title:
            Free-text title used as the search query.  Must be non-blank.
        max_results:
            Upper bound on the number of returned videos (``>= 1``).

        Returns
        -------
        list[EnrichmentVideo]
            At most *max_results* videos in provider rank order.  An empty
            list when nothing matches; "no results" is never an error.
            Every call issues a fresh search.

        Raises
        ------
        media_service.utils.errors.InvalidInputError
            If *title* is blank or *max_results* is below 1.
        media_service.utils.errors.UpstreamError
            On any transport or provider failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider, e.g. ``"youtube"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured with credentials."""
