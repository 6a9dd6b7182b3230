"""Supabase-backed event store.

The pipeline only needs three capabilities from the store, captured by the
`EventStore` protocol: a bulk read of existing events for deduplication, a
batch insert, and fetch-or-create of the bot author profile.
"""

from typing import Protocol

from supabase import Client, create_client

from nightlife_scraper.config import get_settings
from nightlife_scraper.core.event_model import ExtractedEvent, StoredEvent
from nightlife_scraper.core.exceptions import AuthorError, SupabaseError
from nightlife_scraper.logging import get_logger

logger = get_logger(__name__)

EVENTS_TABLE = "events"
PROFILES_TABLE = "profiles"

# PostgREST caps responses at 1000 rows by default
PAGE_SIZE = 1000


class EventStore(Protocol):
    """Store operations used by the pipeline."""

    async def list_events(self) -> list[StoredEvent]:
        ...

    async def insert_events(self, batch: list[ExtractedEvent], author_id: str) -> int:
        ...

    async def get_or_create_author(self, key: str, display_name: str = "Event Bot") -> str:
        ...


class SupabaseEventStore:
    """Client for the trip portal's `events` and `profiles` tables."""

    def __init__(self, client: Client | None = None) -> None:
        """Initialize with an existing client or one built from settings."""
        if client is None:
            settings = get_settings()
            client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
            )
        self._client: Client = client
        self.logger = get_logger("supabase_client")

    @property
    def client(self) -> Client:
        """Get the Supabase client instance."""
        return self._client

    # ==========================================
    # Events
    # ==========================================

    async def list_events(self) -> list[StoredEvent]:
        """Read (title, date, club) for every stored event.

        Raises:
            SupabaseError: The read failed (fatal for the run)
        """
        rows: list[dict] = []
        offset = 0

        try:
            while True:
                response = (
                    self._client.table(EVENTS_TABLE)
                    .select("title, date, club")
                    .range(offset, offset + PAGE_SIZE - 1)
                    .execute()
                )
                page = response.data or []
                rows.extend(page)
                if len(page) < PAGE_SIZE:
                    break
                offset += PAGE_SIZE
        except Exception as e:
            raise SupabaseError(
                f"Failed to read existing events: {e}",
                operation="select",
                table=EVENTS_TABLE,
            ) from e

        events = [
            StoredEvent(
                title=row.get("title") or "",
                date=str(row.get("date") or ""),
                venue=row.get("club") or "",
            )
            for row in rows
        ]
        self.logger.info("existing_events_loaded", count=len(events))
        return events

    async def insert_events(self, batch: list[ExtractedEvent], author_id: str) -> int:
        """Insert one batch attributed to `author_id`.

        Returns:
            Number of rows the store reports as inserted

        Raises:
            SupabaseError: The batch was rejected
        """
        if not batch:
            return 0

        rows = [event.to_row(author_id) for event in batch]
        try:
            response = self._client.table(EVENTS_TABLE).insert(rows).execute()
        except Exception as e:
            raise SupabaseError(
                f"Insert batch error: {e}",
                operation="insert",
                table=EVENTS_TABLE,
            ) from e

        inserted = len(response.data or [])
        self.logger.info("events_inserted", requested=len(rows), inserted=inserted)
        return inserted

    # ==========================================
    # Author profile
    # ==========================================

    async def get_or_create_author(self, key: str, display_name: str = "Event Bot") -> str:
        """Return the profile id for `key`, creating the profile if missing.

        Args:
            key: Internal email-like identifier of the bot
            display_name: Name shown on inserted events

        Raises:
            AuthorError: Lookup or creation failed
        """
        try:
            existing = (
                self._client.table(PROFILES_TABLE)
                .select("id")
                .eq("auth_user_email", key)
                .limit(1)
                .execute()
            )
            if existing.data:
                return existing.data[0]["id"]

            created = (
                self._client.table(PROFILES_TABLE)
                .insert({
                    "auth_user_email": key,
                    "display_name": display_name,
                    "avatar_url": None,
                })
                .execute()
            )
        except Exception as e:
            raise AuthorError(key, str(e)) from e

        if not created.data:
            raise AuthorError(key, "insert returned no row")

        author_id = created.data[0]["id"]
        self.logger.info("bot_profile_created", key=key, author_id=author_id)
        return author_id


# Singleton instance
_store: SupabaseEventStore | None = None


def get_event_store() -> SupabaseEventStore:
    """Get or create the event store singleton."""
    global _store
    if _store is None:
        _store = SupabaseEventStore()
    return _store
