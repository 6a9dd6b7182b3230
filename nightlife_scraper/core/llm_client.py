"""LLM extraction of event records from listing-page HTML.

The extraction service is a capability: given instructions and content, it
returns free text that should contain one JSON array. `GroqExtractionService`
is the production implementation (Groq, or Ollama through its
OpenAI-compatible API). Anything with the same `complete` coroutine can stand
in for it.

Parsing is forgiving: prose around the array is ignored, and each
record is validated on its own so one bad entry never costs the rest.
"""

import json
import re
from datetime import date
from typing import Any, Protocol

import groq
import openai
from groq import AsyncGroq
from openai import AsyncOpenAI
from pydantic import ValidationError

from nightlife_scraper.config.settings import Settings
from nightlife_scraper.config.sources import SourceConfig
from nightlife_scraper.core.event_model import ExtractedEvent
from nightlife_scraper.core.exceptions import InvalidEventError, LLMError, MissingCredentialError
from nightlife_scraper.logging import get_logger
from nightlife_scraper.utils.html_reducer import MAX_HTML_LENGTH, reduce_html

logger = get_logger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

EXTRACTION_PROMPT = """You are an event data extractor. Given HTML from the club "{venue}", extract all upcoming {year} events into a JSON array.

Each event object must have these fields:
- "title": string (event/party name, include headliner DJ names)
- "venue": "{venue}" (always use this exact string)
- "date": string in YYYY-MM-DD format (only {year} dates)
- "time": string or null (e.g. "23:00", "22:00 - 06:00")
- "description": string or null (short description, lineup details)
- "ticket_url": string or null (full URL to buy tickets)

Rules:
- Only include events in {year}
- Skip past events
- If a date is ambiguous, prefer DD/MM/YYYY (European format)
- Return ONLY the JSON array, no markdown, no explanation
- If no events found, return []

Hints for this site: {hints}"""


class ExtractionService(Protocol):
    """Text-to-structured-data capability."""

    async def complete(self, instructions: str, content: str) -> str:
        """Return the service's raw text reply."""
        ...


class GroqExtractionService:
    """Extraction service backed by a chat-completions LLM."""

    def __init__(
        self,
        provider: str = "groq",
        api_key: str | None = None,
        model: str = "llama-3.3-70b-versatile",
        ollama_url: str | None = None,
        max_tokens: int = 4096,
        timeout: float = 30.0,
    ) -> None:
        self.provider = provider
        self.api_key = api_key
        self.model = model
        self.ollama_url = ollama_url
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client: AsyncGroq | AsyncOpenAI | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GroqExtractionService":
        if settings.llm_provider == "ollama":
            model = settings.ollama_model
        else:
            model = settings.groq_model
        return cls(
            provider=settings.llm_provider,
            api_key=settings.groq_api_key,
            model=model,
            ollama_url=settings.ollama_url,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.llm_request_timeout,
        )

    @property
    def client(self) -> AsyncGroq | AsyncOpenAI:
        """Lazy initialization of the LLM client.

        Raises:
            MissingCredentialError: Provider credential not configured
        """
        if self._client is None:
            if self.provider == "ollama":
                if not self.ollama_url:
                    raise MissingCredentialError("OLLAMA_URL")
                # Ollama doesn't need a real API key
                self._client = AsyncOpenAI(
                    base_url=f"{self.ollama_url.rstrip('/')}/v1",
                    api_key="ollama",
                    timeout=self.timeout,
                    max_retries=0,
                )
            else:
                if not self.api_key:
                    raise MissingCredentialError("GROQ_API_KEY")
                self._client = AsyncGroq(
                    api_key=self.api_key,
                    timeout=self.timeout,
                    max_retries=0,
                )
            logger.info("llm_client_initialized", provider=self.provider, model=self.model)
        return self._client

    async def complete(self, instructions: str, content: str) -> str:
        """Send one chat completion and return the reply text.

        Raises:
            LLMError: Non-2xx response, timeout or connection failure
        """
        client = self.client
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instructions},
                    {"role": "user", "content": content},
                ],
                temperature=0.1,
                max_tokens=self.max_tokens,
            )
        except (groq.APIError, openai.APIError) as e:
            raise LLMError(
                f"{self.provider} API error: {e}",
                model=self.model,
                provider=self.provider,
                status_code=getattr(e, "status_code", None),
            ) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None


def build_instructions(source: SourceConfig, target_year: int) -> str:
    """Render the extraction prompt for one venue."""
    return EXTRACTION_PROMPT.format(
        venue=source.name,
        year=target_year,
        hints=source.hints or "none",
    )


def find_json_array(text: str) -> list[Any] | None:
    """Return the first substring of `text` that decodes as a JSON array.

    The model may wrap its answer in prose or markdown fences despite
    instructions, so every `[` is tried as a starting point.
    """
    decoder = json.JSONDecoder()
    start = text.find("[")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, list):
                return value
        start = text.find("[", start + 1)
    return None


def _optional_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def validate_event(item: Any, venue: str, target_year: int) -> ExtractedEvent:
    """Validate one candidate record.

    Args:
        item: One element of the model's array
        venue: Configured venue name (overrides whatever the model wrote)
        target_year: Only dates in this year are accepted

    Returns:
        ExtractedEvent

    Raises:
        InvalidEventError: Missing title/date, bad format, wrong year, or
            not a real calendar date
    """
    if not isinstance(item, dict):
        raise InvalidEventError("not an object", item)

    title = item.get("title")
    if not isinstance(title, str) or not title.strip():
        raise InvalidEventError("missing title", title)

    raw_date = item.get("date")
    if not isinstance(raw_date, str):
        raise InvalidEventError("missing date", raw_date)
    raw_date = raw_date.strip()
    if not DATE_RE.match(raw_date):
        raise InvalidEventError("date not YYYY-MM-DD", raw_date)
    if not raw_date.startswith(f"{target_year}-"):
        raise InvalidEventError(f"date outside {target_year}", raw_date)
    try:
        event_date = date.fromisoformat(raw_date)
    except ValueError as e:
        raise InvalidEventError("not a calendar date", raw_date) from e

    start_time = _optional_str(item.get("time"))
    if start_time is None:
        start_time = _optional_str(item.get("start_time"))

    try:
        return ExtractedEvent(
            title=title,
            venue=venue,
            date=event_date,
            start_time=start_time,
            description=_optional_str(item.get("description")),
            ticket_url=_optional_str(item.get("ticket_url")),
        )
    except ValidationError as e:
        raise InvalidEventError(str(e.errors()[0].get("msg", "invalid")), title) from e


def parse_events_reply(text: str, venue: str, target_year: int) -> list[ExtractedEvent]:
    """Extract and validate events from a raw model reply.

    Never raises: no array, bad JSON or invalid records all degrade to
    fewer (or zero) events.
    """
    if not text:
        return []

    items = find_json_array(text)
    if items is None:
        logger.warning("llm_no_json_array", venue=venue, preview=text[:200])
        return []

    events: list[ExtractedEvent] = []
    for item in items:
        try:
            events.append(validate_event(item, venue, target_year))
        except InvalidEventError as e:
            logger.debug("llm_record_rejected", venue=venue, reason=e.reason, value=e.details.get("value"))

    if len(events) < len(items):
        logger.info("llm_records_dropped", venue=venue, total=len(items), kept=len(events))
    return events


class ExtractionClient:
    """Turns a listing page into validated events for one venue."""

    def __init__(self, service: ExtractionService, max_html_length: int = MAX_HTML_LENGTH) -> None:
        self.service = service
        self.max_html_length = max_html_length

    async def extract(self, html: str, source: SourceConfig, target_year: int) -> list[ExtractedEvent]:
        """Reduce the HTML, ask the service, and validate its reply.

        Raises:
            LLMError: The service call itself failed
            MissingCredentialError: The service has no credential
        """
        processed = reduce_html(html, self.max_html_length)
        instructions = build_instructions(source, target_year)
        content = f"Extract {target_year} events from this HTML:\n\n{processed}"

        logger.debug(
            "llm_extract_start",
            venue=source.name,
            html_length=len(html),
            reduced_length=len(processed),
        )
        reply = await self.service.complete(instructions, content)
        events = parse_events_reply(reply, source.name, target_year)

        logger.info("llm_extracted", venue=source.name, events=len(events))
        return events
