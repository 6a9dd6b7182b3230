"""Listing page fetcher.

One shared httpx client per run, a hard per-request timeout, and a
descriptive bot identity. Every failure surfaces as a FetchError subclass so
the venue scraper can fall back to the next URL.
"""

import httpx

from nightlife_scraper.core.exceptions import FetchError, FetchTimeoutError, HTTPError
from nightlife_scraper.logging import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Ibiza2026Bot/1.0; +https://ibiza-2026.vercel.app)"
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class PageFetcher:
    """Fetch raw HTML for listing pages.

    Example:
        ```python
        async with PageFetcher(timeout=15) as fetcher:
            html = await fetcher.fetch("https://pacha.com/ibiza/events")
        ```
    """

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            timeout: Seconds before a request is abandoned
            user_agent: Client identity sent with every request
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": HTML_ACCEPT,
                },
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> str:
        """GET `url` and return the body text.

        Raises:
            HTTPError: Non-2xx status
            FetchTimeoutError: Timeout elapsed
            FetchError: Any other transport failure
        """
        client = await self._get_client()

        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            logger.warning("fetch_timeout", url=url[:100], timeout=self.timeout)
            raise FetchTimeoutError(url, self.timeout) from e
        except httpx.HTTPError as e:
            logger.warning("fetch_failed", url=url[:100], error=str(e))
            raise FetchError(f"Request to {url} failed: {e}", url=url) from e

        if not response.is_success:
            logger.warning("fetch_http_error", url=url[:100], status_code=response.status_code)
            raise HTTPError(response.status_code, url)

        logger.debug("fetch_ok", url=url[:100], length=len(response.text))
        return response.text

    async def __aenter__(self) -> "PageFetcher":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
