import threading
import time
from collections.abc import Callable


class RateLimitExceededError(Exception):
    """Raised when a client exceeded its request budget for the window."""


class FixedWindowRateLimiter:
    """In-process fixed-window counter keyed by an arbitrary client key."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1 or window_seconds <= 0:
            raise ValueError("Rate limit needs max_requests >= 1 and a positive window")
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, key: str) -> bool:
        """Count one request for ``key``; False once the budget is spent."""
        now = self._clock()
        with self._lock:
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self._window_seconds:
                started, count = now, 0
            if count >= self._max_requests:
                return False
            self._windows[key] = (started, count + 1)
            self._evict(now)
            return True

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _evict(self, now: float) -> None:
        expired = [
            key
            for key, (started, _) in self._windows.items()
            if now - started >= self._window_seconds
        ]
        for key in expired:
            del self._windows[key]
