import time
from typing import Callable, Dict, Optional
from urllib.parse import urlsplit

import httpx
from loguru import logger

from fbref_tables.config.settings import settings
from fbref_tables.exceptions import FetchError, RateLimitError


class PolitenessThrottle:
    """Enforces a minimum delay between consecutive requests to the same host.

    Owned by a single Fetcher for the length of a run. The clock and sleep
    functions are injectable so tests never actually wait.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: Dict[str, float] = {}

    def wait(self, host: str) -> float:
        """Blocks until `host` may be requested again, then marks it as requested.

        Returns the number of seconds slept.
        """
        waited = 0.0
        last = self._last_request.get(host)
        if last is not None:
            remaining = self.min_interval - (self._clock() - last)
            if remaining > 0:
                logger.debug(f"Throttling {host}: sleeping {remaining:.2f}s")
                self._sleep(remaining)
                waited = remaining
        self._last_request[host] = self._clock()
        return waited


class Fetcher:
    """Fetches FBref pages one at a time, politely and without retries."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        throttle: Optional[PolitenessThrottle] = None,
        base_url: Optional[str] = None,
    ):
        self.base_url = base_url or settings.base_url
        self.throttle = throttle or PolitenessThrottle(settings.min_request_interval)
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=httpx.Timeout(settings.request_timeout),
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
        )

    def build_url(self, source_id: str) -> str:
        return self.base_url.format(source_id=source_id)

    def fetch(self, source_id: str) -> str:
        """Returns the raw HTML of the page identified by `source_id`.

        Raises:
            FetchError: on network failure, timeout or a non-success status.
            RateLimitError: when the site answers 429.
        """
        url = self.build_url(source_id)
        host = urlsplit(url).netloc
        self.throttle.wait(host)

        logger.debug(f"GET {url}")
        try:
            response = self.client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out fetching {url} (source {source_id}): {e}") from e
        except httpx.RequestError as e:
            raise FetchError(f"Network error fetching {url} (source {source_id}): {e}") from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            logger.warning(f"Rate limit hit (429) at {url}. Retry-After: {retry_after}")
            raise RateLimitError(
                f"Rate limited fetching {url} (source {source_id}); Retry-After: {retry_after}"
            )

        if not response.is_success:
            raise FetchError(
                f"HTTP {response.status_code} fetching {url} (source {source_id})"
            )

        logger.info(f"Fetched {url} ({len(response.content)} bytes)")
        return response.text

    def close(self) -> None:
        """Closes the underlying HTTP client if this Fetcher created it."""
        if self._owns_client:
            self.client.close()
            logger.debug("Closed HTTP client")

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
