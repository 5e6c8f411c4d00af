"""Fixed-window, per-client request throttle.

The limiter only talks to a ``RateLimitStore``. The in-memory store lives for
the life of one execution environment and is not shared between instances;
point ``RATE_LIMIT_REDIS_URL`` at a Redis server to share counts.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

import redis
from redis.exceptions import RedisError

from .config import Settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitRecord:
    count: int
    reset_time: float


class RateLimitStoreError(Exception):
    pass


class RateLimitStore(Protocol):
    def get(self, key: str) -> Optional[RateLimitRecord]:
        ...

    def reset_if_expired(self, key: str, now: float, window_seconds: float) -> RateLimitRecord:
        """Return the live record for ``key``, opening a fresh window when
        there is none or the current one ended before ``now``."""
        ...

    def increment(self, key: str) -> RateLimitRecord:
        ...


class InMemoryRateLimitStore:
    # Read-modify-write without a lock: concurrent requests may over/under
    # count slightly.

    def __init__(self):
        self._records: Dict[str, RateLimitRecord] = {}
        self._next_sweep = 0.0

    def get(self, key: str) -> Optional[RateLimitRecord]:
        return self._records.get(key)

    def _sweep(self, now: float, window_seconds: float) -> None:
        # Runs at most once per window.
        if now < self._next_sweep:
            return
        expired = [key for key, record in self._records.items() if now > record.reset_time]
        for key in expired:
            del self._records[key]
        self._next_sweep = now + window_seconds

    def reset_if_expired(self, key: str, now: float, window_seconds: float) -> RateLimitRecord:
        self._sweep(now, window_seconds)
        record = self._records.get(key)
        if record is None or now > record.reset_time:
            record = RateLimitRecord(count=0, reset_time=now + window_seconds)
            self._records[key] = record
        return record

    def increment(self, key: str) -> RateLimitRecord:
        record = self._records[key]
        record.count += 1
        return record

    def __len__(self) -> int:
        return len(self._records)


class RedisRateLimitStore:
    """Shares counters between instances through a Redis hash per client."""

    def __init__(self, client: "redis.Redis", prefix: str = "pawnotes:ratelimit:"):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisRateLimitStore":
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, **kwargs)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[RateLimitRecord]:
        try:
            data = self.client.hgetall(self._key(key))
        except RedisError as e:
            raise RateLimitStoreError(str(e)) from e
        if not data:
            return None
        return RateLimitRecord(count=int(data.get("count", 0)), reset_time=float(data.get("reset_time", 0)))

    def reset_if_expired(self, key: str, now: float, window_seconds: float) -> RateLimitRecord:
        record = self.get(key)
        if record is not None and now <= record.reset_time:
            return record

        record = RateLimitRecord(count=0, reset_time=now + window_seconds)
        redis_key = self._key(key)
        try:
            pipe = self.client.pipeline()
            pipe.hset(redis_key, mapping={"count": 0, "reset_time": record.reset_time})
            # Let Redis drop idle clients once their window is over.
            pipe.pexpire(redis_key, int(window_seconds * 1000) + 1000)
            pipe.execute()
        except RedisError as e:
            raise RateLimitStoreError(str(e)) from e
        return record

    def increment(self, key: str) -> RateLimitRecord:
        redis_key = self._key(key)
        try:
            pipe = self.client.pipeline()
            pipe.hincrby(redis_key, "count", 1)
            pipe.hget(redis_key, "reset_time")
            count, reset_time = pipe.execute()
        except RedisError as e:
            raise RateLimitStoreError(str(e)) from e
        return RateLimitRecord(count=int(count), reset_time=float(reset_time or 0))


class RateLimiter:
    def __init__(
        self,
        store: RateLimitStore,
        quota: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.quota = quota
        self.window_seconds = window_seconds
        self.clock = clock

    def allow(self, key: str) -> bool:
        """Count one request for ``key``; False once the quota is used up.

        Store failures let the request through: the throttle is advisory.
        """
        now = self.clock()
        try:
            record = self.store.reset_if_expired(key, now, self.window_seconds)
            if record.count >= self.quota:
                return False
            self.store.increment(key)
        except RateLimitStoreError as e:
            logger.warning(f"Rate limit store unavailable, allowing request for {key}: {e}")
        return True


def build_rate_limiter(settings: Settings) -> RateLimiter:
    if settings.RATE_LIMIT_REDIS_URL:
        store = RedisRateLimitStore.from_url(settings.RATE_LIMIT_REDIS_URL)
    else:
        store = InMemoryRateLimitStore()
    return RateLimiter(
        store,
        quota=settings.RATE_LIMIT_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
