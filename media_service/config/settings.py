"""Application settings loaded from environment variables via pydantic-settings.

Values are read from two sources, highest priority first:

  1. Environment variables, e.g. ``TMDB_BEARER_TOKEN=eyJ...``
  2. A ``.env`` file in the working directory (local development only)

Field names map to upper-cased environment variables automatically
(``cache_ttl_seconds`` <- ``CACHE_TTL_SECONDS``).  Empty strings mean
"not configured"; the wiring in ``main.py`` decides what that implies.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Media service settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Catalog provider (TMDb) ===
    # Either credential works; the bearer token wins when both are set.
    tmdb_base_url: str = "https://api.themoviedb.org/3/"
    tmdb_api_key: str = ""
    tmdb_bearer_token: str = ""

    # === Enrichment provider (YouTube Data API v3) ===
    youtube_base_url: str = "https://www.googleapis.com/youtube/v3/"
    youtube_api_key: str = ""
    youtube_application_name: str = "media-service"

    # === Transport ===
    http_timeout_seconds: float = 30.0
    http_max_retries: int = 3
    http_backoff_seconds: float = 2.0  # first retry waits 2s, then 4s, 8s

    # === Response cache ===
    cache_ttl_seconds: int = 600
    cache_max_size: int = 1024

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    # Comma-separated; overrides ``cors.allowed_origins`` from config.yaml.
    cors_allowed_origins: str = ""

    def has_catalog_credentials(self) -> bool:
        """Return ``True`` if a TMDb bearer token or API key is configured."""
        return bool(self.tmdb_bearer_token or self.tmdb_api_key)

    def has_enrichment_credentials(self) -> bool:
        """Return ``True`` if a YouTube API key is configured."""
        return bool(self.youtube_api_key)

    def cors_origins(self) -> list[str]:
        """Return the configured CORS origins, or an empty list when unset."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]
