"""Custom exception hierarchy for the media service.

All application exceptions inherit from :class:`MediaServiceError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "tmdb", "youtube") caused the failure.

The hierarchy is organized by where the failure originates:

    MediaServiceError  (base -- catch-all for any media service error)
    +-- InvalidInputError               (bad caller input, never retried)
    |   +-- InvalidPageError            (page number below 1)
    +-- UpstreamError                   (any provider failure)
    |   +-- UpstreamTransientError      (network failure / retries exhausted)
    |   +-- UpstreamResponseError       (permanent non-2xx status)
    |   +-- UpstreamMalformedResponseError (payload failed to deserialize)
    +-- ConfigurationError              (startup / missing credentials)

"Not found" is deliberately absent: a missing movie is a valid answer and is
returned as :class:`~media_service.models.results.NotFound`, not raised.
"""

from __future__ import annotations


class MediaServiceError(Exception):
    """Base exception for all media service errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[tmdb] Request timed out``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller input errors
# ---------------------------------------------------------------------------

class InvalidInputError(MediaServiceError):
    """Raised when a caller supplies a blank identifier, query, or bad limit.

    Terminal: raised before any network call and surfaced as HTTP 400.
    """

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.field = field


class InvalidPageError(InvalidInputError):
    """Raised when a search page number is below 1."""

    def __init__(
        self,
        message: str = "Page must be at least 1",
        provider_name: str | None = None,
        field: str | None = "page",
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, field=field)


# ---------------------------------------------------------------------------
# Upstream provider errors
# ---------------------------------------------------------------------------

class UpstreamError(MediaServiceError):
    """Base class for failures talking to an upstream provider.

    Attributes
    ----------
    resource:
        Logical sub-resource that failed (``"movie"``, ``"images"``,
        ``"videos"``, ``"search"``, ``"enrichment"``).
    endpoint:
        Request path relative to the provider base URL.
    status_code:
        HTTP status of the failing response, when there was one.
    """

    def __init__(
        self,
        message: str = "Upstream provider request failed",
        provider_name: str | None = None,
        resource: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.resource = resource
        self.endpoint = endpoint
        self.status_code = status_code


class UpstreamTransientError(UpstreamError):
    """Raised on network failures or when transport retries are exhausted.

    Never cached; the next identical request goes upstream again.
    """


class UpstreamResponseError(UpstreamError):
    """Raised when the provider answers with a non-retryable error status."""


class UpstreamMalformedResponseError(UpstreamError):
    """Raised when a provider payload cannot be deserialized.

    The message always names the sub-resource and endpoint, and the original
    parsing error is chained as ``__cause__``.
    """


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(MediaServiceError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
