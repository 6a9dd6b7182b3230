"""Scheduler module for automatic scraping jobs."""

from nightlife_scraper.scheduler.cron import (
    get_next_run,
    get_scheduler_status,
    init_scheduler,
    scheduled_scrape,
    shutdown_scheduler,
)

__all__ = [
    "get_next_run",
    "get_scheduler_status",
    "init_scheduler",
    "scheduled_scrape",
    "shutdown_scheduler",
]
