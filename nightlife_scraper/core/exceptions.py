"""Unified exception hierarchy for the nightlife event scraper.

Exception categories:
- Configuration errors (unknown venue, missing credentials)
- Transport errors (page fetch failures, extraction service failures)
- Parse errors (malformed extracted records)
- Storage errors (Supabase failures)

Transport and parse errors are recovered at venue or record scope. Storage
errors from the author or bulk-read stages abort the run.
"""


class ScraperError(Exception):
    """Base exception for all scraper errors."""

    def __init__(self, message: str, source: str | None = None, details: dict | None = None):
        self.source = source
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.source:
            msg = f"[{self.source}] {msg}"
        return msg


# ============================================================
# CONFIGURATION ERRORS
# ============================================================


class ConfigurationError(ScraperError):
    """Base class for configuration-related errors."""
    pass


class SourceNotFoundError(ConfigurationError):
    """Raised when a venue is not found in the registry."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = available
        msg = f"Unknown venue: {name}"
        if available:
            msg += f". Available: {', '.join(available[:5])}"
            if len(available) > 5:
                msg += "..."
        super().__init__(msg, source=name)


class MissingCredentialError(ConfigurationError):
    """Raised when a required credential is not configured."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} not set", details={"setting": setting})


# ============================================================
# TRANSPORT ERRORS
# ============================================================


class TransportError(ScraperError):
    """Base class for network-level failures (recoverable per venue)."""
    pass


class FetchError(TransportError):
    """Raised when a listing page cannot be retrieved."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        timed_out: bool = False,
        source: str | None = None,
    ):
        self.url = url
        self.status_code = status_code
        self.timed_out = timed_out
        details: dict = {}
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code
        if timed_out:
            details["timed_out"] = True
        super().__init__(message, source=source, details=details)


class HTTPError(FetchError):
    """Raised for non-2xx responses."""

    def __init__(self, status_code: int, url: str, source: str | None = None):
        super().__init__(
            f"HTTP {status_code} from {url}",
            url=url,
            status_code=status_code,
            source=source,
        )


class FetchTimeoutError(FetchError):
    """Raised when a page request exceeds its timeout."""

    def __init__(self, url: str, timeout: float, source: str | None = None):
        self.timeout = timeout
        super().__init__(
            f"Request to {url} timed out after {timeout}s",
            url=url,
            timed_out=True,
            source=source,
        )


class LLMError(TransportError):
    """Raised when the extraction service call itself fails."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        provider: str | None = None,
        status_code: int | None = None,
        source: str | None = None,
    ):
        self.model = model
        self.provider = provider
        self.status_code = status_code
        super().__init__(
            message,
            source=source,
            details={"model": model, "provider": provider, "status_code": status_code},
        )


# ============================================================
# PARSE ERRORS
# ============================================================


class ParseError(ScraperError):
    """Base class for data parsing errors."""
    pass


class InvalidEventError(ParseError):
    """Raised when an extracted record fails validation."""

    def __init__(self, reason: str, value: object = None, source: str | None = None):
        self.reason = reason
        self.value = value
        super().__init__(
            f"Invalid event: {reason}",
            source=source,
            details={"value": str(value)[:100] if value is not None else None},
        )


# ============================================================
# STORAGE ERRORS
# ============================================================


class StorageError(ScraperError):
    """Base class for storage-related errors."""
    pass


class SupabaseError(StorageError):
    """Raised for Supabase-specific errors."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        table: str | None = None,
        source: str | None = None,
    ):
        self.operation = operation
        self.table = table
        super().__init__(
            message,
            source=source,
            details={"operation": operation, "table": table},
        )


class AuthorError(StorageError):
    """Raised when the bot author profile cannot be fetched or created."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(
            f"Failed to create bot profile: {reason}",
            details={"key": key},
        )
