from typing import Protocol


class RateLimiter(Protocol):
    """Fixed-window request counter. ``key`` is e.g. ``otp-request:+15551234567``."""

    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        ...
