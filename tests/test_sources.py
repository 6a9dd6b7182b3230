"""Tests for the venue registry."""

import pytest

from nightlife_scraper.config.sources import SourceConfig, SourceRegistry, slugify
from nightlife_scraper.config.sources.venues import SPOTLIGHT_URLS, VENUES
from nightlife_scraper.core.exceptions import SourceNotFoundError


@pytest.fixture
def registry():
    """Registry reset to the shipped venue list after each test."""
    yield SourceRegistry
    SourceRegistry.clear()


class TestSourceConfig:
    """Tests for SourceConfig."""

    def test_slug_derived_from_name(self):
        assert SourceConfig(name="Eden Ibiza").slug == "eden-ibiza"

    def test_urls_are_stored_as_tuple(self):
        config = SourceConfig(name="Amnesia", urls=["https://a.test", "https://b.test"])

        assert config.urls == ("https://a.test", "https://b.test")

    def test_slugify_non_ascii(self):
        assert slugify("Hï Ibiza") == "h-ibiza"
        assert slugify("DC-10") == "dc-10"


class TestVenueList:
    """Tests for the shipped venue list."""

    def test_seven_venues(self):
        assert len(VENUES) == 7
        assert len({v.slug for v in VENUES}) == 7

    def test_every_venue_has_official_and_fallback_url(self):
        for venue in VENUES:
            assert len(venue.urls) >= 2, venue.name
            assert venue.urls[-1] in SPOTLIGHT_URLS
            assert venue.hints

    def test_official_page_comes_first(self):
        for venue in VENUES:
            assert venue.urls[0] not in SPOTLIGHT_URLS


class TestSourceRegistry:
    """Tests for SourceRegistry lookups."""

    def test_loads_shipped_venues(self, registry):
        assert registry.count() == 7
        assert registry.names()[0] == "Hï Ibiza"

    def test_get_by_slug_name_or_loose_name(self, registry):
        assert registry.get("dc-10").name == "DC-10"
        assert registry.get("pacha ibiza").name == "Pacha Ibiza"
        assert registry.get("Eden  Ibiza").name == "Eden Ibiza"

    def test_get_unknown(self, registry):
        assert registry.get("Space") is None

    def test_require_unknown_lists_available(self, registry):
        with pytest.raises(SourceNotFoundError) as exc:
            registry.require("Space")

        assert "Unknown venue: Space" in str(exc.value)
        assert exc.value.available == registry.names()

    def test_inactive_venue_is_skipped(self, registry):
        registry.register(SourceConfig(name="Privilege", urls=("https://privilege.test",), is_active=False))

        assert registry.get("privilege") is not None
        assert "Privilege" not in [s.name for s in registry.get_active()]
        assert registry.count() == 8

    def test_clear_reloads_on_next_lookup(self, registry):
        registry.clear()

        assert registry.count() == 7
