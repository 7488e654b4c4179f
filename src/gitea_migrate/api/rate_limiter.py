"""Rate limiting for hosting service API calls."""

import time


class RateLimiter:
    """Token bucket rate limiter for API requests."""

    def __init__(self, requests_per_second: float = 10.0):
        """Initialize rate limiter.

        Args:
            requests_per_second: Maximum requests per second allowed
        """
        self.requests_per_second = requests_per_second
        self.tokens = requests_per_second
        self.last_update = time.monotonic()

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_update

        # Add tokens based on elapsed time
        self.tokens = min(
            self.requests_per_second, self.tokens + elapsed * self.requests_per_second
        )
        self.last_update = now

    def acquire(self) -> None:
        """Acquire a token for making a request.

        Blocks until a token is available.
        """
        self._refill()

        if self.tokens >= 1:
            self.tokens -= 1
            return

        sleep_time = (1 - self.tokens) / self.requests_per_second
        time.sleep(sleep_time)
        self.tokens = 0
        self.last_update = time.monotonic()
