"""
Test the fixed-window rate limiter.
"""
from concurrent.futures import ThreadPoolExecutor

import pytest

from events_api.services.exceptions import TooManyRequests
from events_api.services.rate_limit import RateLimiter


class TestRateLimiter:
    def test_allows_up_to_max_attempts(self, rate_limiter):
        assert [rate_limiter.hit("update-event:1") for _ in range(3)] == [1, 2, 3]

    def test_fourth_attempt_is_rejected(self, rate_limiter):
        for _ in range(3):
            rate_limiter.hit("update-event:1")

        with pytest.raises(TooManyRequests) as exc_info:
            rate_limiter.hit("update-event:1")

        assert 0 < exc_info.value.retry_after <= 60

    def test_counters_are_per_key(self, rate_limiter):
        for _ in range(3):
            rate_limiter.hit("update-event:1")
        assert rate_limiter.hit("update-event:2") == 1

    def test_window_has_fixed_expiry(self, rate_limiter, fake_redis):
        rate_limiter.hit("update-event:1")
        assert 0 < fake_redis.ttl("throttle:update-event:1") <= 60

    def test_window_reset(self, rate_limiter, fake_redis):
        for _ in range(3):
            rate_limiter.hit("update-event:1")
        fake_redis.delete("throttle:update-event:1")
        assert rate_limiter.hit("update-event:1") == 1

    def test_concurrent_hits_are_all_counted(self, fake_redis):
        limiter = RateLimiter(fake_redis, max_attempts=100, decay_seconds=60)

        with ThreadPoolExecutor(max_workers=10) as executor:
            results = list(executor.map(lambda _: limiter.hit("update-event:1"), range(50)))

        assert sorted(results) == list(range(1, 51))
        assert fake_redis.get("throttle:update-event:1") == "50"
