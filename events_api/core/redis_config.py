from typing import Iterator

import redis

from events_api.core.config import settings


def get_redis_url() -> str:
    return settings.redis_url


def get_redis() -> Iterator[redis.Redis]:
    """Redis client shared by the response cache and the rate limiter."""
    client = redis.from_url(get_redis_url(), decode_responses=True)
    try:
        yield client
    finally:
        client.close()
