"""Venue source registry.

Venues are a fixed, hand-maintained list registered on first lookup from
`nightlife_scraper.config.sources.venues`. Each venue has an ordered chain of
listing URLs (tried first to last, stopping at the first that loads) and
free-text hints that steer the extraction model.

Usage:
    from nightlife_scraper.config.sources import SourceRegistry

    source = SourceRegistry.get("Pacha Ibiza")
    for source in SourceRegistry.get_active():
        ...
"""

import re
from dataclasses import dataclass, field

from nightlife_scraper.core.exceptions import SourceNotFoundError


def slugify(name: str) -> str:
    """Lowercase ASCII slug for a venue name ("Hï Ibiza" -> "h-ibiza")."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    return slug.strip("-")


@dataclass(frozen=True)
class SourceConfig:
    """Configuration for one venue."""

    name: str
    urls: tuple[str, ...] = ()
    hints: str = ""
    slug: str = field(default="")
    is_active: bool = True

    def __post_init__(self) -> None:
        # Accept lists from hand-written config, store immutably
        object.__setattr__(self, "urls", tuple(self.urls))
        if not self.slug:
            object.__setattr__(self, "slug", slugify(self.name))


class SourceRegistry:
    """Central registry for venue sources.

    Preserves registration order, which is also the order of outcomes in a
    run summary.
    """

    _sources: dict[str, SourceConfig] = {}
    _initialized: bool = False

    @classmethod
    def register(cls, config: SourceConfig) -> None:
        """Register a venue configuration, keyed by slug."""
        cls._sources[config.slug] = config

    @classmethod
    def get(cls, key: str) -> SourceConfig | None:
        """Get a venue by slug or (case-insensitive) name.

        Args:
            key: Venue slug or display name

        Returns:
            Venue configuration or None
        """
        cls._ensure_initialized()
        if key in cls._sources:
            return cls._sources[key]
        key_lower = key.strip().lower()
        for source in cls._sources.values():
            if source.name.lower() == key_lower:
                return source
        return cls._sources.get(slugify(key))

    @classmethod
    def require(cls, key: str) -> SourceConfig:
        """Like `get`, but raise SourceNotFoundError for unknown venues."""
        source = cls.get(key)
        if source is None:
            raise SourceNotFoundError(key, available=cls.names())
        return source

    @classmethod
    def get_active(cls) -> list[SourceConfig]:
        cls._ensure_initialized()
        return [s for s in cls._sources.values() if s.is_active]

    @classmethod
    def all(cls) -> list[SourceConfig]:
        cls._ensure_initialized()
        return list(cls._sources.values())

    @classmethod
    def names(cls) -> list[str]:
        cls._ensure_initialized()
        return [s.name for s in cls._sources.values()]

    @classmethod
    def count(cls) -> int:
        cls._ensure_initialized()
        return len(cls._sources)

    @classmethod
    def _ensure_initialized(cls) -> None:
        """Register the hand-maintained venue list on first use."""
        if cls._initialized:
            return

        from nightlife_scraper.config.sources.venues import VENUES

        cls._initialized = True
        for config in VENUES:
            cls._sources.setdefault(config.slug, config)

    @classmethod
    def clear(cls) -> None:
        """Clear all registered sources (for testing)."""
        cls._sources.clear()
        cls._initialized = False


__all__ = [
    "SourceConfig",
    "SourceRegistry",
    "slugify",
]
