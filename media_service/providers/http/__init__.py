"""Shared HTTP transport for upstream providers."""

from media_service.providers.http.transport import (
    ResilientHttpClient,
    parse_model,
    raise_for_upstream_status,
)

__all__ = ["ResilientHttpClient", "parse_model", "raise_for_upstream_status"]
