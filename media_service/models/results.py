"""Explicit outcome variants for single-movie lookups.

A lookup either finds the movie (:class:`Found`) or learns that the provider
has no such movie (:class:`NotFound`).  Failures are never a third return
value; they are raised from :mod:`media_service.utils.errors`.  Callers
branch with ``isinstance`` (or ``match``) instead of testing for ``None``,
so "no data" cannot be mistaken for "error".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from media_service.models.movie import MovieRecord


@dataclass(frozen=True)
class Found:
    """The provider returned the movie."""

    record: MovieRecord


@dataclass(frozen=True)
class NotFound:
    """The provider reported that no movie exists for ``movie_id``."""

    movie_id: str


MovieLookup = Union[Found, NotFound]
