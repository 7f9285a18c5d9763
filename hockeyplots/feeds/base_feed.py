from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from hockeyplots.config.settings import settings
from hockeyplots.models.feed import FeedBatch
from hockeyplots.models.team import Team

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class FeedError(Exception):
    """Custom exception for feed-related errors (transport or malformed response)."""

    pass


class FeedAuthenticationError(FeedError):
    """Exception raised for authentication failures (401, 403)."""

    pass


class FeedRateLimitError(FeedError):
    """Exception raised for rate limit errors (429)."""

    pass


class RetryableStatusError(Exception):
    """Internal marker for a status code worth another attempt."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"retryable status {status_code} from {url}")
        self.status_code = status_code


class BaseFeed(ABC):
    """Abstract base class for schedule feeds."""

    name: str = "unknown"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.feed_timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": "hockeyplots/0.1", "Accept": "application/json"},
        )

    @abstractmethod
    async def fetch_schedules(self, teams: List[Team]) -> FeedBatch:
        """Fetch the current-season schedule of every team.

        Args:
            teams: Teams to fetch, in the order the batch should keep.

        Returns:
            A FeedBatch keyed by team feed id.

        Raises:
            FeedError: any team could not be fetched or parsed; the batch is
                abandoned as a whole.
        """
        pass

    async def _make_request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Makes an HTTP request, retrying transient failures with backoff."""
        try:
            return await self._request_with_retry(method, url, params=params, **kwargs)
        except FeedError:
            raise
        except RetryableStatusError as e:
            logger.error(f"Max retries exceeded for {self.name} request to {url}: {e}")
            if e.status_code == 429:
                raise FeedRateLimitError(f"Rate limited by {self.name}") from e
            raise FeedError(f"HTTP error: {e.status_code} after retries") from e
        except httpx.RequestError as e:
            logger.error(f"Max retries exceeded for {self.name} request to {url}: {e}")
            raise FeedError(f"Failed request to {self.name} after multiple retries") from e

    @retry(
        stop=stop_after_attempt(settings.feed_max_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((httpx.RequestError, RetryableStatusError)),
        reraise=True,
    )
    async def _request_with_retry(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> httpx.Response:
        logger.debug(f"Making request", method=method, url=url, params=params)
        try:
            response = await self.client.request(method, url, params=params, **kwargs)
        except httpx.RequestError as e:
            # Network errors, timeouts etc.
            logger.warning(f"Request error for {self.name}, retrying: {e}")
            raise

        if response.status_code in {401, 403}:
            logger.warning(f"Authentication error ({response.status_code}) for {self.name} at {url}.")
            raise FeedAuthenticationError(
                f"Authentication failed ({response.status_code}) for {self.name}"
            )

        if response.status_code in RETRYABLE_STATUS_CODES:
            retry_after = response.headers.get("Retry-After")
            logger.warning(
                f"Retrying request for {self.name} due to status {response.status_code}"
                f" (Retry-After: {retry_after})"
            )
            raise RetryableStatusError(response.status_code, url)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error during request for {self.name}: {e.response.status_code} - {e}")
            raise FeedError(f"HTTP error: {e.response.status_code}") from e

        logger.debug(f"Request successful: {response.status_code} for {url}")
        return response

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.debug(f"Closed HTTP client for {self.name}")
