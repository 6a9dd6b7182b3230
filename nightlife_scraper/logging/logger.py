"""Structured logging configuration using structlog.

structlog events are routed through the stdlib `logging` tree so the same
event can go to the console (pretty or JSON) and, optionally, to a JSON-lines
file for the hosting platform's log drain.
"""

import logging
import sys
from pathlib import Path

import structlog
from structlog.types import Processor

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "apscheduler.executors.default")


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def _handler(handler: logging.Handler, renderer: Processor, shared: list[Processor]) -> logging.Handler:
    processors: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if isinstance(renderer, structlog.processors.JSONRenderer):
        # ConsoleRenderer formats tracebacks itself
        processors.append(structlog.processors.format_exc_info)
    processors.append(renderer)

    handler.setFormatter(structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processors=processors))
    return handler


def setup_logging(
    level: str = "INFO",
    log_format: str = "console",
    log_file: str | None = None,
) -> None:
    """Configure structured logging for the scraper.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: Console format ("console" for pretty, "json" for structured)
        log_file: Optional path; every event is appended there as one JSON line
    """
    log_level = getattr(logging, level.upper())
    shared = _shared_processors()

    handlers = [_handler(logging.StreamHandler(sys.stdout), _renderer(log_format), shared)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        handlers.append(_handler(file_handler, structlog.processors.JSONRenderer(), shared))

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class LogContext:
    """Bind key/values to every log line emitted inside the block."""

    def __init__(self, **kwargs: str | int | float | bool) -> None:
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: object) -> None:
        structlog.contextvars.unbind_contextvars(*self.context.keys())


def log_scrape_run(run_id: str, dry_run: bool = False) -> LogContext:
    """Tag every line of one pipeline run with its id."""
    return LogContext(run_id=run_id, dry_run=dry_run)
