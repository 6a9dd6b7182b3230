"""Optional in-process scheduling of the scrape job.

Production uses an external cron hitting `/cron/scrape-events`. Setting
SCHEDULER_ENABLED=true runs the same job from the API process instead.
"""

from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from nightlife_scraper.config.settings import Settings, get_settings
from nightlife_scraper.core.pipeline import run_scrape_job
from nightlife_scraper.logging import get_logger

logger = get_logger(__name__)

JOB_ID = "scrape_events"

# Global scheduler instance
scheduler: AsyncIOScheduler | None = None

# Last run info
_last_run: dict[str, Any] = {
    "started_at": None,
    "completed_at": None,
    "status": "never_run",
    "new_event_count": 0,
    "failed_venues": [],
    "error": None,
}


async def scheduled_scrape() -> dict[str, Any]:
    """Run the scrape job and record the result for status queries.

    There is no caller to report to, so a fatal error is logged and kept in
    the last-run record.
    """
    global _last_run

    _last_run = {
        "started_at": datetime.now().astimezone().isoformat(),
        "completed_at": None,
        "status": "running",
        "new_event_count": 0,
        "failed_venues": [],
        "error": None,
    }
    logger.info("scheduled_scrape_started")

    try:
        summary = await run_scrape_job()
    except Exception as e:
        _last_run["status"] = "failed"
        _last_run["error"] = str(e)
        logger.error("scheduled_scrape_failed", error=str(e), exc_info=True)
    else:
        _last_run["new_event_count"] = summary.new_event_count
        _last_run["failed_venues"] = summary.failed_venues
        _last_run["status"] = "completed_with_errors" if summary.failed_venues else "completed"

    _last_run["completed_at"] = datetime.now().astimezone().isoformat()
    return _last_run


def init_scheduler(settings: Settings | None = None) -> AsyncIOScheduler:
    """Initialize and start the scheduler (idempotent)."""
    global scheduler

    if scheduler is not None:
        return scheduler

    settings = settings or get_settings()
    tz = ZoneInfo(settings.scheduler_timezone)

    scheduler = AsyncIOScheduler(timezone=tz)
    scheduler.add_job(
        scheduled_scrape,
        CronTrigger.from_crontab(settings.scheduler_cron, timezone=tz),
        id=JOB_ID,
        name=f"Venue scrape ({settings.scheduler_cron})",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info("scheduler_started", cron=settings.scheduler_cron, next_run=get_next_run())

    return scheduler


def shutdown_scheduler() -> None:
    """Stop the scheduler if it was started."""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("scheduler_stopped")


def get_next_run() -> str | None:
    """Get the next scheduled run time."""
    if scheduler is None:
        return None

    job = scheduler.get_job(JOB_ID)
    if job and job.next_run_time:
        return job.next_run_time.isoformat()
    return None


def get_scheduler_status() -> dict[str, Any]:
    """Get current scheduler status."""
    if scheduler is None:
        return {
            "status": "not_initialized",
            "next_run": None,
            "last_run": _last_run,
        }

    return {
        "status": "running" if scheduler.running else "paused",
        "next_run": get_next_run(),
        "last_run": _last_run,
    }
