import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from ...application.ports.rate_limiter import RateLimiter


class InMemoryRateLimiter(RateLimiter):
    """Sliding-window limiter for a single process."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        # per key, the instants at which each counted hit leaves its window
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        now = self._clock()
        with self._lock:
            self._prune(now)
            hits = self._hits.setdefault(key, deque())
            if len(hits) >= max_requests:
                return False
            hits.append(now + window_seconds)
            return True

    def _prune(self, now: float) -> None:
        # keys whose window has fully passed are dropped
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and hits[0] <= now:
                hits.popleft()
            if not hits:
                del self._hits[key]

    def __len__(self) -> int:
        return len(self._hits)
