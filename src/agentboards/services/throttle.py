"""Coarse per-address request throttle.

This guards the HTTP surface against floods from a single client. It is
process-local and is never relied on for quota or vote consistency.
"""

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from threading import Lock
from typing import Final

from agentboards.core.settings import settings

_WINDOW_SECONDS: Final[float] = 60.0


class RequestThrottle:
    """Sliding-window request counter keyed by client address."""

    def __init__(
        self,
        limit: int,
        window_seconds: float = _WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = Lock()
        self._last_sweep = clock()

    def allow(self, key: str) -> bool:
        """Record a request for ``key`` and return False once the window is full."""
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            hits = self._hits[key]
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True

    def retry_after(self, key: str) -> int:
        """Seconds until the oldest request for ``key`` leaves the window."""
        with self._lock:
            hits = self._hits.get(key)
            if not hits:
                return 0
            remaining = hits[0] + self.window_seconds - self._clock()
        return max(int(remaining) + 1, 1)

    def _sweep(self, cutoff: float) -> None:
        """Forget addresses whose newest request has left the window."""
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_throttle: RequestThrottle | None = None


def get_request_throttle() -> RequestThrottle:
    """Return the process-wide throttle configured from settings."""
    global _throttle
    if _throttle is None:
        _throttle = RequestThrottle(settings.rate_limit_per_minute)
    return _throttle
