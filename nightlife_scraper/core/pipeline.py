"""Event ingestion pipeline.

Runs the four stages of a scrape job, strictly in order:
1. Ensure the bot author profile exists (failure aborts the run)
2. Scrape every venue (per-venue failures are recorded, never raised)
3. Deduplicate against the store and insert new events in batches
4. Summarize

Usage:
    from nightlife_scraper.core.pipeline import run_scrape_job

    summary = await run_scrape_job()
"""

import asyncio
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from nightlife_scraper.config.settings import Settings, get_settings
from nightlife_scraper.config.sources import SourceConfig, SourceRegistry
from nightlife_scraper.core.event_model import ExtractedEvent, RunSummary, VenueScrapeOutcome
from nightlife_scraper.core.exceptions import StorageError
from nightlife_scraper.core.llm_client import ExtractionClient, ExtractionService, GroqExtractionService
from nightlife_scraper.core.page_fetcher import DEFAULT_USER_AGENT, PageFetcher
from nightlife_scraper.core.supabase_client import EventStore, get_event_store
from nightlife_scraper.core.venue_scraper import VenueScraper
from nightlife_scraper.logging import get_logger, log_scrape_run
from nightlife_scraper.utils.deduplication import EventReconciler, batched
from nightlife_scraper.utils.html_reducer import MAX_HTML_LENGTH

logger = get_logger(__name__)

BOT_EMAIL = "bot@ibiza-scraper.internal"
DRY_RUN_AUTHOR = "dry-run"


class ScrapeStrategy(str, Enum):
    """How venues are scheduled within the scrape stage."""

    BATCHED = "batched"  # Small concurrent groups, for throughput
    PACED = "paced"  # One at a time with a delay, for source courtesy


@dataclass
class PipelineConfig:
    """Tunables for one pipeline run."""

    target_year: int = 2026
    fetch_timeout: float = 15.0
    max_html_length: int = MAX_HTML_LENGTH
    user_agent: str = DEFAULT_USER_AGENT
    insert_batch_size: int = 50
    scrape_batch_size: int = 3
    strategy: ScrapeStrategy = ScrapeStrategy.BATCHED
    venue_delay: float = 0.0
    page_delay: float = 0.0
    author_key: str = BOT_EMAIL
    author_name: str = "Event Bot"
    dry_run: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            target_year=settings.target_year,
            fetch_timeout=settings.fetch_timeout,
            max_html_length=settings.max_html_length,
            user_agent=settings.scraper_user_agent,
            insert_batch_size=settings.insert_batch_size,
            scrape_batch_size=settings.scrape_batch_size,
            strategy=ScrapeStrategy(settings.scrape_strategy),
            venue_delay=settings.venue_delay,
            page_delay=settings.page_delay,
            author_key=settings.bot_email,
            author_name=settings.bot_display_name,
            dry_run=settings.dry_run,
        )


class ScrapePipeline:
    """Orchestrates one end-to-end run.

    Only the author stage and the store read inside reconciliation can raise
    out of `run`; both mean nothing can be inserted safely.
    """

    def __init__(
        self,
        config: PipelineConfig,
        store: EventStore,
        scraper: VenueScraper,
        sources: Sequence[SourceConfig] | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.scraper = scraper
        self.sources = list(sources) if sources is not None else SourceRegistry.get_active()
        self.reconciler = EventReconciler(store)

    async def run(self) -> RunSummary:
        """Execute the full pipeline.

        Returns:
            RunSummary with every venue outcome and the inserted count

        Raises:
            StorageError: Author profile or existing events unavailable
        """
        started_at = datetime.now(timezone.utc)
        run_id = uuid.uuid4().hex[:8]

        with log_scrape_run(run_id, dry_run=self.config.dry_run):
            logger.info(
                "run_start",
                venues=len(self.sources),
                strategy=self.config.strategy.value,
                target_year=self.config.target_year,
            )

            author_id = await self.ensure_author()
            outcomes = await self.scrape_all()
            new_event_count = await self.insert_new_events(outcomes, author_id)

            summary = RunSummary(
                started_at=started_at,
                finished_at=datetime.now(timezone.utc),
                outcomes=outcomes,
                new_event_count=new_event_count,
                dry_run=self.config.dry_run,
            )
            logger.info(
                "run_complete",
                new_events=summary.new_event_count,
                extracted=summary.total_extracted,
                failed_venues=summary.failed_venues,
                venues=[
                    {"venue": o.venue, "events": len(o.events), "error": o.error}
                    for o in outcomes
                ],
                duration_seconds=round((summary.finished_at - started_at).total_seconds(), 2),
            )
        return summary

    # ==========================================
    # Stage 1: author
    # ==========================================

    async def ensure_author(self) -> str:
        """Fetch or create the bot profile used as `created_by`."""
        if self.config.dry_run:
            return DRY_RUN_AUTHOR

        author_id = await self.store.get_or_create_author(
            self.config.author_key,
            self.config.author_name,
        )
        logger.debug("author_ready", author_id=author_id)
        return author_id

    # ==========================================
    # Stage 2: scrape
    # ==========================================

    async def scrape_all(self) -> list[VenueScrapeOutcome]:
        """Scrape every venue. Outcomes keep the source order."""
        if self.config.strategy == ScrapeStrategy.PACED:
            return await self._scrape_paced()
        return await self._scrape_batched()

    async def _scrape_batched(self) -> list[VenueScrapeOutcome]:
        outcomes: list[VenueScrapeOutcome] = []
        for batch in batched(self.sources, self.config.scrape_batch_size):
            results = await asyncio.gather(*(self.scraper.scrape(s) for s in batch))
            outcomes.extend(results)
        return outcomes

    async def _scrape_paced(self) -> list[VenueScrapeOutcome]:
        outcomes: list[VenueScrapeOutcome] = []
        for i, source in enumerate(self.sources):
            if i > 0 and self.config.venue_delay > 0:
                await asyncio.sleep(self.config.venue_delay)
            outcomes.append(await self.scraper.scrape(source))
        return outcomes

    # ==========================================
    # Stage 3: reconcile + insert
    # ==========================================

    async def insert_new_events(self, outcomes: list[VenueScrapeOutcome], author_id: str) -> int:
        """Insert events not yet stored, in batches.

        A failed batch is logged and skipped; later batches still run.

        Returns:
            Number of inserted rows (would-be inserts in dry-run mode)
        """
        candidates: list[ExtractedEvent] = [e for o in outcomes for e in o.events]
        if not candidates:
            return 0

        new_events = await self.reconciler.filter_new(candidates)
        if not new_events:
            return 0

        if self.config.dry_run:
            logger.info("dry_run_skip_insert", would_insert=len(new_events))
            return len(new_events)

        total_inserted = 0
        for batch_num, batch in enumerate(batched(new_events, self.config.insert_batch_size), start=1):
            try:
                total_inserted += await self.store.insert_events(batch, author_id)
            except StorageError as e:
                logger.error(
                    "insert_batch_failed",
                    batch_num=batch_num,
                    batch_size=len(batch),
                    error=str(e),
                )
        return total_inserted


async def run_scrape_job(
    settings: Settings | None = None,
    sources: Sequence[SourceConfig] | None = None,
    dry_run: bool | None = None,
    strategy: ScrapeStrategy | None = None,
    store: EventStore | None = None,
    service: ExtractionService | None = None,
) -> RunSummary:
    """Build the production collaborators and run the pipeline once."""
    settings = settings or get_settings()
    config = PipelineConfig.from_settings(settings)
    if dry_run is not None:
        config.dry_run = dry_run
    if strategy is not None:
        config.strategy = strategy

    # Injected services are closed by their owner
    owned_service = GroqExtractionService.from_settings(settings) if service is None else None
    extractor = ExtractionClient(
        service or owned_service,
        max_html_length=config.max_html_length,
    )

    try:
        async with PageFetcher(timeout=config.fetch_timeout, user_agent=config.user_agent) as fetcher:
            scraper = VenueScraper(
                fetcher,
                extractor,
                target_year=config.target_year,
                page_delay=config.page_delay,
            )
            pipeline = ScrapePipeline(
                config,
                store=store or get_event_store(),
                scraper=scraper,
                sources=sources,
            )
            return await pipeline.run()
    finally:
        if owned_service is not None:
            await owned_service.aclose()
