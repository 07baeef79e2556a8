"""Configuration: environment-driven settings plus optional YAML defaults."""

from media_service.config.loader import load_config
from media_service.config.settings import Settings

__all__ = ["Settings", "load_config"]
