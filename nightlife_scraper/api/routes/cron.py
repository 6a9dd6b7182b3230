"""Scheduled trigger for the scrape job.

The external scheduler sends `Authorization: Bearer <CRON_SECRET>`.
"""

import secrets
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from nightlife_scraper.config.settings import Settings, get_settings
from nightlife_scraper.core.event_model import RunSummary
from nightlife_scraper.core.pipeline import run_scrape_job
from nightlife_scraper.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

JobRunner = Callable[[], Awaitable[RunSummary]]


def get_job_runner() -> JobRunner:
    """Dependency returning the coroutine that runs one scrape job."""
    return run_scrape_job


def is_authorized(authorization: str | None, secret: str | None) -> bool:
    """Constant-time check of the bearer header against the configured secret."""
    if not secret or not authorization:
        return False
    expected = f"Bearer {secret}".encode()
    return secrets.compare_digest(authorization.encode(), expected)


@router.get("/scrape-events")
async def scrape_events(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
    runner: JobRunner = Depends(get_job_runner),
):
    """Run the scrape job and return its summary."""
    if not is_authorized(authorization, settings.cron_secret):
        logger.warning("cron_unauthorized", header_present=authorization is not None)
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    try:
        summary = await runner()
    except Exception as e:
        message = str(e) or "Unknown error"
        logger.error("cron_scrape_fatal", error=message, exc_info=True)
        return JSONResponse({"error": message}, status_code=500)

    return JSONResponse(summary.model_dump(mode="json"))
