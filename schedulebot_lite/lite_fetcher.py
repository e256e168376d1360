"""HTTP/file retrieval of the calendar feed - schedulebot_lite version."""

import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urljoin, urlparse

import httpx

from .lite_exceptions import (
    LiteFetchError,
    LiteIOError,
    LiteNetworkError,
    LiteTooManyRedirectsError,
)
from .lite_models import FetchResult

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "lunariafactory-schedule-bot/1.0"
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_TIMEOUT_SECONDS = 30.0

REDIRECT_STATUS_MIN = 300
REDIRECT_STATUS_MAX = 399


def is_http_url(source: str) -> bool:
    """Return True when ``source`` looks like an http(s) URL rather than a path."""
    return urlparse(source).scheme in ("http", "https")


def read_local_feed(path: str | Path) -> FetchResult:
    """Read a calendar file verbatim.

    Raises:
        LiteIOError: if the file is missing or unreadable
    """
    p = Path(path)
    try:
        content = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LiteIOError(f"Cannot read calendar file {p}: {e}", path=str(p)) from e

    logger.debug("Read %d characters from %s", len(content), p)
    return FetchResult(content=content, source=str(p))


class LiteFeedFetcher:
    """Async HTTP client for downloading the ICS feed.

    Redirects are followed manually so the hop count can be capped and each
    hop logged; httpx's own redirect handling is disabled.
    """

    def __init__(
        self,
        settings: Any = None,
        shared_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize feed fetcher.

        Args:
            settings: Object with optional ``user_agent``, ``max_redirects`` and
                ``request_timeout`` attributes (e.g. Config)
            shared_client: Optional client to use instead of creating one; it is
                never closed by the fetcher
        """
        self.user_agent = str(getattr(settings, "user_agent", None) or DEFAULT_USER_AGENT)
        self.max_redirects = int(getattr(settings, "max_redirects", DEFAULT_MAX_REDIRECTS))
        self.timeout = float(getattr(settings, "request_timeout", DEFAULT_TIMEOUT_SECONDS))
        self.client: Optional[httpx.AsyncClient] = shared_client
        self._owns_client = shared_client is None

        logger.debug(
            "Feed fetcher initialized (shared_client: %s, max_redirects: %d)",
            not self._owns_client,
            self.max_redirects,
        )

    async def __aenter__(self) -> "LiteFeedFetcher":
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self.client is None or self.client.is_closed:
            self.client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                follow_redirects=False,
                headers={"User-Agent": self.user_agent},
            )
            self._owns_client = True
        return self.client

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self.client is None or not self._owns_client:
            # Shared clients belong to the caller
            return
        if not self.client.is_closed:
            await self.client.aclose()
            logger.debug("Closed HTTP client")
        self.client = None

    async def fetch(self, url: str) -> FetchResult:
        """GET ``url``, following redirects, and return the body text.

        Raises:
            LiteFetchError: non-http(s) URL or non-2xx terminal status
            LiteTooManyRedirectsError: more than ``max_redirects`` hops
            LiteNetworkError: DNS, connection or timeout failure
        """
        if not is_http_url(url):
            raise LiteFetchError(f"Unsupported URL scheme: {url}", url=url)

        client = self._ensure_client()
        current = url
        visited: list[str] = []

        while True:
            logger.debug("Fetching ICS from %s", current)
            try:
                response = await client.get(
                    current, headers={"User-Agent": self.user_agent}, follow_redirects=False
                )
            except httpx.TransportError as e:
                raise LiteNetworkError(f"Network error fetching {current}: {e}") from e

            status = response.status_code
            location = response.headers.get("location")

            if REDIRECT_STATUS_MIN <= status <= REDIRECT_STATUS_MAX and location:
                next_url = urljoin(current, location)
                if len(visited) >= self.max_redirects:
                    raise LiteTooManyRedirectsError(
                        f"Exceeded {self.max_redirects} redirects fetching {url}",
                        status_code=status,
                        url=next_url,
                    )
                logger.debug("HTTP %d redirect: %s -> %s", status, current, next_url)
                visited.append(next_url)
                current = next_url
                continue

            if not response.is_success:
                raise LiteFetchError(f"HTTP {status}", status_code=status, url=current)

            content = response.text
            if "BEGIN:VCALENDAR" not in content:
                logger.warning("Content from %s does not appear to be ICS", current)

            logger.debug(
                "Fetched %d bytes from %s after %d redirect(s)",
                len(response.content),
                current,
                len(visited),
            )
            return FetchResult(
                content=content, source=current, status_code=status, redirects=visited
            )

    async def retrieve(self, source: str) -> FetchResult:
        """Fetch an http(s) URL or read a local path, depending on ``source``."""
        if is_http_url(source):
            return await self.fetch(source)
        return read_local_feed(source)
