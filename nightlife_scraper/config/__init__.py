"""Configuration: environment settings and the venue source registry."""

from nightlife_scraper.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
