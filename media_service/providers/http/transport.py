"""Resilient GET transport shared by the upstream provider adapters.

Wraps an injected ``httpx.AsyncClient`` (base URL, credentials and timeout
are configured by the wiring layer) with retry and exponential backoff for
transient outcomes:

    httpx.TransportError (connect/read errors, timeouts)
    HTTP 408 Request Timeout
    HTTP 429 Too Many Requests   (``Retry-After`` honoured when larger)
    HTTP 5xx

Retries are invisible to the callers except as latency.  Once retries are
exhausted a network failure raises :class:`UpstreamTransientError`; a
retryable status is returned as-is and classified by the caller through
:func:`raise_for_upstream_status`.

The module also holds the two response helpers every adapter uses:
status classification and JSON-to-model parsing with descriptive errors.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from media_service.utils.errors import (
    UpstreamMalformedResponseError,
    UpstreamResponseError,
    UpstreamTransientError,
)
from media_service.utils.logging import get_logger

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_DEFAULT_MAX_RETRIES = 3
_DEFAULT_BACKOFF_SECONDS = 2.0
_RETRYABLE_STATUS_CODES = frozenset({408, 429})
_BODY_SNIPPET_LENGTH = 200


def is_transient_status(status_code: int) -> bool:
    """Return ``True`` for statuses worth retrying (408, 429, 5xx)."""
    return status_code in _RETRYABLE_STATUS_CODES or 500 <= status_code < 600


class ResilientHttpClient:
    """GET-only HTTP client with bounded retries for one upstream provider.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient`` for connection pooling and testability.
        Its ``base_url`` lets adapters pass provider-relative paths.
    provider_name:
        Name used in log events and raised errors (e.g. ``"tmdb"``).
    max_retries:
        Retries after the first attempt (default 3, i.e. up to 4 requests).
    backoff_base:
        Delay before retry *n* (0-based) is ``backoff_base * 2**n`` seconds.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        provider_name: str,
        max_retries: int = _DEFAULT_MAX_RETRIES,
        backoff_base: float = _DEFAULT_BACKOFF_SECONDS,
    ) -> None:
        self._http = http_client
        self._provider_name = provider_name
        self._max_retries = max(0, max_retries)
        self._backoff_base = max(0.0, backoff_base)
        self._logger = get_logger(__name__)

    @property
    def provider_name(self) -> str:
        return self._provider_name

    async def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        resource: str | None = None,
    ) -> httpx.Response:
        """Issue a GET for *path*, retrying transient failures.

        Query parameters are encoded by httpx exactly once; callers pass raw
        values.  ``asyncio.CancelledError`` is never caught here, so a
        cancelled request stops before its next attempt.
        """
        attempt = 0
        while True:
            try:
                response = await self._http.get(path, params=params)
            except httpx.TransportError as exc:
                if attempt < self._max_retries:
                    await self._wait_before_retry(attempt, path, reason=type(exc).__name__)
                    attempt += 1
                    continue
                self._logger.error(
                    "upstream_retries_exhausted",
                    provider=self._provider_name,
                    path=path,
                    attempts=attempt + 1,
                    error=str(exc),
                )
                raise UpstreamTransientError(
                    message=f"Request to {path} failed after {attempt + 1} attempt(s): {exc}",
                    provider_name=self._provider_name,
                    resource=resource,
                    endpoint=path,
                ) from exc
            except httpx.RequestError as exc:
                raise UpstreamTransientError(
                    message=f"Request to {path} failed: {exc}",
                    provider_name=self._provider_name,
                    resource=resource,
                    endpoint=path,
                ) from exc

            if is_transient_status(response.status_code) and attempt < self._max_retries:
                await self._wait_before_retry(
                    attempt,
                    path,
                    reason=f"HTTP {response.status_code}",
                    retry_after=response.headers.get("Retry-After"),
                )
                attempt += 1
                continue

            return response

    async def _wait_before_retry(
        self,
        attempt: int,
        path: str,
        reason: str,
        retry_after: str | None = None,
    ) -> None:
        delay = self._backoff_base * (2**attempt)
        retry_after = (retry_after or "").strip()
        if retry_after.isdigit():
            delay = max(delay, float(retry_after))
        self._logger.warning(
            "upstream_request_retry",
            provider=self._provider_name,
            path=path,
            attempt=attempt + 1,
            max_retries=self._max_retries,
            delay_seconds=delay,
            reason=reason,
        )
        await asyncio.sleep(delay)


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def raise_for_upstream_status(
    response: httpx.Response,
    provider_name: str,
    resource: str,
    endpoint: str,
) -> None:
    """Raise the matching upstream error for a non-2xx *response*.

    404 is **not** handled here; each call site decides whether it means
    "not found" or "empty".  Transient statuses (after transport retries)
    map to :class:`UpstreamTransientError`, everything else to the permanent
    :class:`UpstreamResponseError`.
    """
    if response.is_success:
        return

    snippet = (response.text or "")[:_BODY_SNIPPET_LENGTH]
    message = f"{resource} request to {endpoint} failed with HTTP {response.status_code}"
    if snippet:
        message = f"{message}: {snippet}"

    error_cls = (
        UpstreamTransientError
        if is_transient_status(response.status_code)
        else UpstreamResponseError
    )
    raise error_cls(
        message=message,
        provider_name=provider_name,
        resource=resource,
        endpoint=endpoint,
        status_code=response.status_code,
    )


def parse_model(
    response: httpx.Response,
    model: type[_ModelT],
    provider_name: str,
    resource: str,
    endpoint: str,
) -> _ModelT:
    """Deserialize a JSON object body into *model*.

    Malformed JSON, a non-object payload (including ``null``), and schema
    mismatches all raise :class:`UpstreamMalformedResponseError` naming the
    sub-resource and endpoint, with the parsing error chained.  An object
    that parses to an empty model is valid.
    """
    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamMalformedResponseError(
            message=f"Failed to deserialize {resource} payload from {endpoint}: invalid JSON ({exc})",
            provider_name=provider_name,
            resource=resource,
            endpoint=endpoint,
            status_code=response.status_code,
        ) from exc

    if not isinstance(payload, dict):
        raise UpstreamMalformedResponseError(
            message=(
                f"Failed to deserialize {resource} payload from {endpoint}: "
                f"expected a JSON object, got {type(payload).__name__}"
            ),
            provider_name=provider_name,
            resource=resource,
            endpoint=endpoint,
            status_code=response.status_code,
        )

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise UpstreamMalformedResponseError(
            message=(
                f"Failed to deserialize {resource} payload from {endpoint} "
                f"into {model.__name__}: {exc.error_count()} validation error(s)"
            ),
            provider_name=provider_name,
            resource=resource,
            endpoint=endpoint,
            status_code=response.status_code,
        ) from exc
