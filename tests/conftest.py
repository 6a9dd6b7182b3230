"""Pytest configuration and shared fixtures."""

import os
import sys
from datetime import date

import pytest

# Settings require store credentials; tests never reach a real store
os.environ.setdefault("NEXT_PUBLIC_SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from nightlife_scraper.config.settings import get_settings  # noqa: E402
from nightlife_scraper.config.sources import SourceConfig  # noqa: E402
from nightlife_scraper.core.event_model import ExtractedEvent, StoredEvent  # noqa: E402
from nightlife_scraper.core.exceptions import SupabaseError  # noqa: E402
from nightlife_scraper.utils.deduplication import event_key  # noqa: E402

# Fix encoding for Windows
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeEventStore:
    """In-memory EventStore.

    `fail_batches` holds 1-based insert call numbers that raise.
    """

    def __init__(
        self,
        existing: list[StoredEvent] | None = None,
        fail_batches: set[int] | None = None,
        fail_author: bool = False,
        fail_read: bool = False,
    ) -> None:
        self.rows: list[StoredEvent] = list(existing or [])
        self.fail_batches = fail_batches or set()
        self.fail_author = fail_author
        self.fail_read = fail_read
        self.insert_calls: list[list[ExtractedEvent]] = []
        self.list_calls = 0
        self.authors: dict[str, str] = {}

    async def list_events(self) -> list[StoredEvent]:
        self.list_calls += 1
        if self.fail_read:
            raise SupabaseError("connection refused", operation="select", table="events")
        return list(self.rows)

    async def insert_events(self, batch: list[ExtractedEvent], author_id: str) -> int:
        self.insert_calls.append(batch)
        if len(self.insert_calls) in self.fail_batches:
            raise SupabaseError("synthetic failure", operation="insert", table="events")
        for event in batch:
            self.rows.append(
                StoredEvent(title=event.title, date=event.date.isoformat(), venue=event.venue)
            )
        return len(batch)

    async def get_or_create_author(self, key: str, display_name: str = "Event Bot") -> str:
        if self.fail_author:
            from nightlife_scraper.core.exceptions import AuthorError

            raise AuthorError(key, "permission denied")
        return self.authors.setdefault(key, f"author-{len(self.authors) + 1}")

    def keys(self) -> list[str]:
        return [event_key(r.title, r.date, r.venue) for r in self.rows]


@pytest.fixture
def fake_store() -> FakeEventStore:
    return FakeEventStore()


@pytest.fixture
def source() -> SourceConfig:
    """Venue with a primary and a fallback URL."""
    return SourceConfig(
        name="Pacha Ibiza",
        urls=("https://pacha.test/events", "https://spotlight.test/events"),
        hints="Titles are party brands.",
    )


def make_event(title: str = "Solomun +1", venue: str = "Pacha Ibiza", day: int = 28, **kwargs) -> ExtractedEvent:
    """ExtractedEvent on June `day`, 2026."""
    return ExtractedEvent(title=title, venue=venue, date=date(2026, 6, day), **kwargs)


@pytest.fixture
def store_factory():
    """Build FakeEventStore instances with custom failure modes."""
    return FakeEventStore


@pytest.fixture
def event_factory():
    """Build ExtractedEvent instances (see make_event)."""
    return make_event
