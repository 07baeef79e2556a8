"""Pydantic response schemas for the media service API.

Movie and search payloads are served directly as the domain models
(``MovieRecord`` / ``SearchPage``); the schemas here cover the envelopes
that have no domain counterpart.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any] = Field(default_factory=dict)
    cache_ttl_seconds: float | None = None
