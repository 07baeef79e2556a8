"""Movie media service: TMDb catalog data enriched with YouTube videos, behind a TTL cache."""

__version__ = "0.1.0"
