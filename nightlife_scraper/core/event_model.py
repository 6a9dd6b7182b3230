"""Pydantic models for scraped events and run results."""

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ExtractedEvent(BaseModel):
    """A validated event produced by the extraction client.

    Only built from records that passed validation; never partially
    populated.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    title: Annotated[str, Field(min_length=1)]
    venue: Annotated[str, Field(min_length=1)]
    date: date
    start_time: str | None = None  # Free text, e.g. "23:00" or "22:00 - 06:00"
    description: str | None = None
    ticket_url: str | None = None

    def to_row(self, author_id: str) -> dict[str, str | None]:
        """Map to an `events` table row attributed to `author_id`."""
        return {
            "title": self.title,
            "club": self.venue,
            "date": self.date.isoformat(),
            "time": self.start_time,
            "description": self.description,
            "ticket_url": self.ticket_url,
            "created_by": author_id,
        }


class StoredEvent(BaseModel):
    """Existing event row, as read for deduplication."""

    title: str
    date: str  # As stored, YYYY-MM-DD
    venue: str


class VenueScrapeOutcome(BaseModel):
    """Result of scraping one venue in one run.

    `error` is metadata, not an exception: a venue with an error and no
    events is a degraded but completed outcome.
    """

    venue: str
    events: list[ExtractedEvent] = Field(default_factory=list)
    error: str | None = None
    url: str | None = None  # URL that produced this outcome

    @property
    def success(self) -> bool:
        return self.error is None


class RunSummary(BaseModel):
    """Terminal artifact of one pipeline run, safe to log verbatim."""

    model_config = ConfigDict(frozen=True)

    started_at: datetime
    finished_at: datetime
    outcomes: list[VenueScrapeOutcome]
    new_event_count: int = 0
    dry_run: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_extracted(self) -> int:
        return sum(len(o.events) for o in self.outcomes)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed_venues(self) -> list[str]:
        return [o.venue for o in self.outcomes if o.error is not None]
