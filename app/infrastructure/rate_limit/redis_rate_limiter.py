import logging

import redis

from ...application.ports.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class RedisRateLimiter(RateLimiter):
    """Fixed-window limiter shared by every worker pointed at the same Redis."""

    def __init__(self, url: str, prefix: str = "rl:") -> None:
        self.client = redis.Redis.from_url(url)
        self.prefix = prefix

    def key_for(self, key: str, window_seconds: int) -> str:
        return f"{self.prefix}{key}:{window_seconds}"

    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        rk = self.key_for(key, window_seconds)
        # INCR + EXPIRE NX: the window starts at the first hit
        pipe = self.client.pipeline()
        pipe.incr(rk, 1)
        pipe.expire(rk, window_seconds, nx=True)
        count, _ = pipe.execute()
        return int(count) <= int(max_requests)
