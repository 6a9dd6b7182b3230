"""Core modules for the scraper."""

from nightlife_scraper.core.event_model import (
    ExtractedEvent,
    RunSummary,
    StoredEvent,
    VenueScrapeOutcome,
)
from nightlife_scraper.core.exceptions import (
    ConfigurationError,
    FetchError,
    LLMError,
    ParseError,
    ScraperError,
    StorageError,
    TransportError,
)

__all__ = [
    # Models
    "ExtractedEvent",
    "RunSummary",
    "StoredEvent",
    "VenueScrapeOutcome",
    # Exceptions
    "ScraperError",
    "ConfigurationError",
    "TransportError",
    "FetchError",
    "LLMError",
    "ParseError",
    "StorageError",
]
