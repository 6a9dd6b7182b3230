"""FastAPI application exposing the scrape trigger.

Run with:
    uvicorn nightlife_scraper.api.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from nightlife_scraper import __version__
from nightlife_scraper.api.routes import cron, sources
from nightlife_scraper.config.settings import Settings, get_settings
from nightlife_scraper.config.sources import SourceRegistry
from nightlife_scraper.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_file)

    if settings.scheduler_enabled:
        from nightlife_scraper.scheduler import init_scheduler, shutdown_scheduler

        init_scheduler(settings)
        yield
        shutdown_scheduler()
    else:
        yield


app = FastAPI(
    title="Nightlife Event Scraper API",
    description="Scheduled ingestion of Ibiza club events for the trip portal",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(cron.router, prefix="/cron", tags=["Cron"])
app.include_router(sources.router, prefix="/sources", tags=["Sources"])


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Nightlife Event Scraper API",
        "version": __version__,
    }


@app.get("/health", tags=["Health"])
async def health(settings: Settings = Depends(get_settings)):
    """Configuration health check (no store round-trip)."""
    status: dict = {
        "status": "ok",
        "venues": SourceRegistry.count(),
        "extraction_configured": settings.extraction_configured,
        "llm_provider": settings.llm_provider,
        "cron_secret_configured": bool(settings.cron_secret),
        "target_year": settings.target_year,
    }

    if settings.scheduler_enabled:
        from nightlife_scraper.scheduler import get_scheduler_status

        status["scheduler"] = get_scheduler_status()
    else:
        status["scheduler"] = "external_cron"

    return status
