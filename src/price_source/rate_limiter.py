"""Token-bucket rate limiter shared by the price source worker threads."""

from __future__ import annotations

import threading
import time


class RateLimiter:
    """Thread-safe minimum-interval rate limiter.

    Args:
        requests_per_minute: Maximum requests allowed per minute.
            Zero or less disables limiting.
    """

    def __init__(self, requests_per_minute: int = 120) -> None:
        self._interval = 60.0 / requests_per_minute if requests_per_minute > 0 else 0.0
        self._next_allowed: float = 0.0
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Block until the next request slot is reached."""
        if not self._interval:
            return
        with self._lock:
            now = time.monotonic()
            delay = self._next_allowed - now
            self._next_allowed = max(now, self._next_allowed) + self._interval
        if delay > 0:
            time.sleep(delay)
