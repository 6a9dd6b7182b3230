"""Logging configuration and handlers."""

from nightlife_scraper.logging.logger import LogContext, get_logger, log_scrape_run, setup_logging

__all__ = ["LogContext", "get_logger", "log_scrape_run", "setup_logging"]
