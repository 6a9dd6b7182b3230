"""Tests for the per-venue URL fallback chain."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from nightlife_scraper.config.sources import SourceConfig
from nightlife_scraper.core.exceptions import FetchTimeoutError, HTTPError, LLMError
from nightlife_scraper.core.venue_scraper import NO_URLS_ERROR, VenueScraper

PRIMARY = "https://pacha.test/events"
FALLBACK = "https://spotlight.test/events"


def _scraper(fetch_side_effect, extract_side_effect=None) -> VenueScraper:
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(side_effect=fetch_side_effect)
    extractor = MagicMock()
    extractor.extract = AsyncMock(side_effect=extract_side_effect)
    return VenueScraper(fetcher, extractor, target_year=2026)


class TestVenueScraper:
    """Tests for VenueScraper.scrape()."""

    @pytest.mark.asyncio
    async def test_primary_success(self, source, event_factory):
        events = [event_factory("Solomun +1"), event_factory("Music On", day=26)]
        scraper = _scraper(["<html>pacha</html>"], [events])

        outcome = await scraper.scrape(source)

        assert outcome.success
        assert outcome.events == events
        assert outcome.url == PRIMARY
        scraper.fetcher.fetch.assert_awaited_once_with(PRIMARY)

    @pytest.mark.asyncio
    async def test_falls_back_after_fetch_error(self, source, event_factory):
        events = [event_factory("Solomun +1")]
        scraper = _scraper([HTTPError(403, PRIMARY), "<html>spotlight</html>"], [events])

        outcome = await scraper.scrape(source)

        assert outcome.error is None
        assert outcome.events == events
        assert outcome.url == FALLBACK
        assert [c.args[0] for c in scraper.fetcher.fetch.await_args_list] == [PRIMARY, FALLBACK]

    @pytest.mark.asyncio
    async def test_falls_back_after_extraction_error(self, source, event_factory):
        events = [event_factory("Glitterbox", venue="Pacha Ibiza")]
        scraper = _scraper(
            ["<html>a</html>", "<html>b</html>"],
            [LLMError("groq API error: 429"), events],
        )

        outcome = await scraper.scrape(source)

        assert outcome.events == events
        assert outcome.url == FALLBACK

    @pytest.mark.asyncio
    async def test_empty_primary_does_not_fall_back(self, source):
        scraper = _scraper(["<html>nothing scheduled</html>", "<html>unused</html>"], [[]])

        outcome = await scraper.scrape(source)

        assert outcome.error is None
        assert outcome.events == []
        assert outcome.url == PRIMARY
        assert scraper.fetcher.fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_all_urls_fail_reports_last_error(self, source):
        scraper = _scraper([HTTPError(500, PRIMARY), FetchTimeoutError(FALLBACK, 15.0)])

        outcome = await scraper.scrape(source)

        assert outcome.events == []
        assert outcome.error == f"Request to {FALLBACK} timed out after 15.0s"
        assert outcome.url == FALLBACK
        scraper.extractor.extract.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_captured(self, source):
        scraper = _scraper([RuntimeError(), RuntimeError("boom")])

        outcome = await scraper.scrape(source)

        assert outcome.error == "boom"

    @pytest.mark.asyncio
    async def test_blank_message_uses_exception_name(self):
        scraper = _scraper([ValueError()])

        outcome = await scraper.scrape(SourceConfig(name="Amnesia", urls=("https://amnesia.test",)))

        assert outcome.error == "ValueError"

    @pytest.mark.asyncio
    async def test_no_urls(self):
        scraper = _scraper([])

        outcome = await scraper.scrape(SourceConfig(name="Closed Club"))

        assert outcome.venue == "Closed Club"
        assert outcome.error == NO_URLS_ERROR
        assert outcome.events == []
        scraper.fetcher.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_passes_source_and_year_to_extractor(self, source):
        scraper = _scraper(["<html/>"], [[]])

        await scraper.scrape(source)

        scraper.extractor.extract.assert_awaited_once_with("<html/>", source, 2026)
