"""HTTP fetcher for Whistle documentation pages."""

import logging

import httpx

from mcp_whistle_documentation.errors import FetchError

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Retrieves raw page markup over HTTP."""

    USER_AGENT = "mcp-whistle-documentation/0.1"

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialise fetcher.

        Args:
            transport: Optional httpx transport, mainly for tests.
        """
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=True,
                headers={"User-Agent": self.USER_AGENT},
            )
        return self._client

    async def fetch(self, url: str) -> str:
        """Fetch a URL and return the response body as text.

        Args:
            url: Absolute URL to retrieve.

        Returns:
            Response body text.

        Raises:
            FetchError: If the host is unreachable or the response is not 2xx.
        """
        logger.debug("Fetching URL: %s", url)
        try:
            response = await self._get_client().get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Error fetching %s: %s", url, exc)
            raise FetchError(url, exc) from exc

        logger.info("Successfully fetched %s (%d bytes)", url, len(response.content))
        return response.text

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
