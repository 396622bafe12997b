"""One-shot "force refresh" request owned by the caller."""

from __future__ import annotations

import threading


class RefreshOverride:
    """A refresh flag that survives across calls until it is taken once.

    Usage:
        override = RefreshOverride()
        override.request()
        override.take()  # True
        override.take()  # False
    """

    def __init__(self) -> None:
        self._requested = False
        self._lock = threading.Lock()

    def request(self) -> None:
        with self._lock:
            self._requested = True

    def take(self) -> bool:
        """Return whether a refresh was requested and clear the request."""
        with self._lock:
            requested, self._requested = self._requested, False
            return requested

    @property
    def pending(self) -> bool:
        return self._requested
