# astrobio_navigator/ai/rate_limit.py

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TokenBucket:
    """
    Token-bucket limiter for outbound model calls.

    `rate` tokens are added per second up to `capacity`. `acquire()` takes
    one token, sleeping until one is available. With capacity=1 this
    degrades to "at least 1/rate seconds between calls": the bucket starts
    full, so N calls wait N-1 times (no delay before the first call).

    clock and sleep are injectable so tests can run without real waits.
    """

    def __init__(
        self,
        rate: float,
        capacity: int = 1,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")

        self.rate = float(rate)
        self.capacity = int(capacity)
        self._clock = clock
        self._sleep = sleep

        self._tokens = float(capacity)
        self._updated_at = clock()
        self._blocked_until: Optional[float] = None

    def _refill(self, now: float) -> None:
        elapsed = max(0.0, now - self._updated_at)
        self._tokens = min(float(self.capacity), self._tokens + elapsed * self.rate)
        self._updated_at = now

    def acquire(self) -> float:
        """
        Take one token, blocking as needed. Returns the seconds waited.
        """
        waited = 0.0
        now = self._clock()

        if self._blocked_until is not None and now < self._blocked_until:
            delay = self._blocked_until - now
            logger.debug("Rate limiter backing off for %.2fs", delay)
            self._sleep(delay)
            waited += delay
            now = self._clock()
        self._blocked_until = None

        self._refill(now)
        if self._tokens < 1.0:
            delay = (1.0 - self._tokens) / self.rate
            logger.debug("Rate limiting: sleeping for %.2fs", delay)
            self._sleep(delay)
            waited += delay
            self._refill(self._clock())
            # Sleep may return a hair early; never go negative.
            self._tokens = max(self._tokens, 1.0)

        self._tokens -= 1.0
        return waited

    def penalize(self, seconds: float) -> None:
        """
        Block the next acquire() for at least `seconds` and drain the bucket.

        Used after the upstream API reports it is rate limiting us.
        """
        now = self._clock()
        self._tokens = 0.0
        self._updated_at = now
        until = now + max(0.0, seconds)
        if self._blocked_until is None or until > self._blocked_until:
            self._blocked_until = until
