"""Nightlife venue event scraper for the Ibiza 2026 trip portal."""

__version__ = "1.0.0"
