"""JSON HTTP client with rate limiting and retry."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from src.common.config import PriceSourceSettings, settings

from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class HTTPClient:
    """HTTP client wrapping requests for the price-transparency API.

    Features:
    - Rate limiting shared across worker threads
    - Automatic retries with exponential backoff
    - JSON decoding
    """

    MAX_RETRIES = 3
    BACKOFF_BASE = 2.0

    def __init__(self, config: PriceSourceSettings | None = None) -> None:
        self.config = config or settings.price_source
        self._rate_limiter = RateLimiter(self.config.rate_limit_rpm)
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        })

    def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a GET request with rate limiting and retries, return decoded JSON.

        Args:
            url: Target URL.
            params: Query parameters.

        Returns:
            Decoded JSON body.

        Raises:
            requests.RequestException: After all retries exhausted, or
                immediately on a 4xx other than 429.
            ValueError: If the body is not valid JSON.
        """
        last_exc: Exception | None = None
        for attempt in range(self.MAX_RETRIES):
            self._rate_limiter.wait()
            try:
                resp = self._session.get(
                    url,
                    params=params,
                    timeout=self.config.request_timeout_seconds,
                )
                resp.raise_for_status()
            except requests.RequestException as exc:
                last_exc = exc

                # 4xx (except 429) are permanent failures
                if (
                    isinstance(exc, requests.HTTPError)
                    and exc.response is not None
                    and 400 <= exc.response.status_code < 500
                    and exc.response.status_code != 429
                ):
                    logger.warning("Request failed (4xx, no retry): %s", exc)
                    raise

                if attempt + 1 >= self.MAX_RETRIES:
                    break
                wait_time = self.BACKOFF_BASE ** attempt
                logger.warning(
                    "Request failed (attempt %d/%d): %s, retrying in %.1fs",
                    attempt + 1,
                    self.MAX_RETRIES,
                    exc,
                    wait_time,
                )
                time.sleep(wait_time)
            else:
                # A malformed body will not fix itself on retry
                return resp.json()

        raise last_exc  # type: ignore[misc]

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
