"""Event deduplication against the store.

Two events are the same when their normalized (title, date, venue) keys
match. No fuzzy matching: near-duplicate titles are distinct events.
"""

from collections.abc import Iterable, Iterator, Sequence
from datetime import date
from typing import TYPE_CHECKING, TypeVar

from nightlife_scraper.core.event_model import ExtractedEvent
from nightlife_scraper.logging import get_logger

if TYPE_CHECKING:
    from nightlife_scraper.core.supabase_client import EventStore

logger = get_logger(__name__)

T = TypeVar("T")


def normalize_text(text: str | None) -> str:
    """Lowercase and trim. Inner whitespace and punctuation are kept."""
    if not text:
        return ""
    return text.strip().lower()


def event_key(title: str | None, event_date: date | str, venue: str | None) -> str:
    """Build the dedup key `title|YYYY-MM-DD|venue`.

    Used for both stored rows and fresh candidates so the two always agree.
    """
    if isinstance(event_date, date):
        date_part = event_date.isoformat()
    else:
        date_part = str(event_date).strip()[:10]
    return f"{normalize_text(title)}|{date_part}|{normalize_text(venue)}"


def batched(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive chunks of at most `size` items."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    for i in range(0, len(items), size):
        yield list(items[i : i + size])


class EventReconciler:
    """Filters candidate events down to those not already stored.

    One bulk read of the store per run; everything else is in memory.
    """

    def __init__(self, store: "EventStore") -> None:
        self.store = store

    async def load_existing_keys(self) -> set[str]:
        """Read every stored (title, date, venue) and return their keys."""
        existing = await self.store.list_events()
        return {event_key(e.title, e.date, e.venue) for e in existing}

    async def filter_new(self, candidates: Iterable[ExtractedEvent]) -> list[ExtractedEvent]:
        """Return candidates whose key is absent from the store.

        Keys of accepted candidates join the seen set, so a candidate repeated
        within the same run survives only once.
        """
        candidates = list(candidates)
        if not candidates:
            return []

        seen = await self.load_existing_keys()
        new_events: list[ExtractedEvent] = []
        duplicates = 0

        for event in candidates:
            key = event_key(event.title, event.date, event.venue)
            if key in seen:
                duplicates += 1
                continue
            seen.add(key)
            new_events.append(event)

        logger.info(
            "reconcile_complete",
            candidates=len(candidates),
            new=len(new_events),
            duplicates=duplicates,
        )
        return new_events
