"""Per-venue scraping with an ordered URL fallback chain."""

import asyncio

from nightlife_scraper.config.sources import SourceConfig
from nightlife_scraper.core.event_model import VenueScrapeOutcome
from nightlife_scraper.core.llm_client import ExtractionClient
from nightlife_scraper.core.page_fetcher import PageFetcher
from nightlife_scraper.logging import get_logger

logger = get_logger(__name__)

NO_URLS_ERROR = "No URLs configured"


class VenueScraper:
    """Fetch + extract for one venue at a time.

    `scrape` never raises: every failure ends up in the outcome's `error`.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        extractor: ExtractionClient,
        target_year: int,
        page_delay: float = 0.0,
    ) -> None:
        self.fetcher = fetcher
        self.extractor = extractor
        self.target_year = target_year
        self.page_delay = page_delay

    async def scrape(self, source: SourceConfig) -> VenueScrapeOutcome:
        """Try each URL in order until one fetches and extracts cleanly.

        The first URL that raises nothing wins, even with zero events: an
        empty but reachable page does not fall through to the next URL.
        When every URL raises, the last error is reported.
        """
        if not source.urls:
            logger.warning("venue_no_urls", venue=source.name)
            return VenueScrapeOutcome(venue=source.name, error=NO_URLS_ERROR)

        last_error = ""
        last_url: str | None = None

        for i, url in enumerate(source.urls):
            if i > 0 and self.page_delay > 0:
                await asyncio.sleep(self.page_delay)

            last_url = url
            try:
                html = await self.fetcher.fetch(url)
                events = await self.extractor.extract(html, source, self.target_year)
            except Exception as e:
                last_error = str(e) or type(e).__name__
                remaining = len(source.urls) - i - 1
                logger.warning(
                    "venue_url_failed",
                    venue=source.name,
                    url=url[:100],
                    error=last_error,
                    error_type=type(e).__name__,
                    remaining_urls=remaining,
                )
                continue

            logger.info("venue_scraped", venue=source.name, url=url[:100], events=len(events))
            return VenueScrapeOutcome(venue=source.name, events=events, url=url)

        logger.error("venue_scrape_failed", venue=source.name, error=last_error)
        return VenueScrapeOutcome(venue=source.name, error=last_error, url=last_url)
