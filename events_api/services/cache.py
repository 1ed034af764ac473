"""
Redis-backed response cache.

Values are stored as JSON with an expiry; a miss runs the producer and
stores what it returns.  Two requests missing at the same time both
compute and the last write wins.
"""

import json
import logging
from typing import Any, Callable

import redis

logger = logging.getLogger(__name__)


class ResponseCache:
    def __init__(self, client: redis.Redis):
        self.client = client

    def get_or_compute(self, key: str, ttl: int, producer: Callable[[], Any]) -> Any:
        cached = self.client.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return json.loads(cached)

        logger.debug("Cache miss for %s", key)
        value = producer()
        self.client.set(key, json.dumps(value), ex=ttl)
        return value


def events_listing_key(include: str | None) -> str:
    """Cache key of the event listing; the page number is deliberately not part of it."""
    return f"events:{include or ''}"
