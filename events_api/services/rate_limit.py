"""
Fixed-window rate limiting backed by redis.

The first hit opens a window of ``decay_seconds``; every hit inside the
window increments the same counter.  Opening the window, incrementing and
reading the remaining time run in one MULTI/EXEC transaction so concurrent
requests from the same actor are never undercounted.
"""

import logging

import redis

from events_api.services.exceptions import TooManyRequests

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, client: redis.Redis, max_attempts: int, decay_seconds: int, prefix: str = "throttle"):
        self.client = client
        self.max_attempts = max_attempts
        self.decay_seconds = decay_seconds
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def hit(self, key: str) -> int:
        """Record an attempt and return the number of attempts in the current window.

        Raises ``TooManyRequests`` once the count exceeds ``max_attempts``.
        """
        redis_key = self._key(key)
        pipe = self.client.pipeline(transaction=True)
        pipe.set(redis_key, 0, ex=self.decay_seconds, nx=True)
        pipe.incr(redis_key)
        pipe.ttl(redis_key)
        _, attempts, ttl = pipe.execute()

        if attempts > self.max_attempts:
            retry_after = ttl if ttl and ttl > 0 else self.decay_seconds
            logger.warning("Rate limit exceeded for %s (%d attempts)", key, attempts)
            raise TooManyRequests(retry_after=retry_after)
        return attempts

