from __future__ import annotations
import logging
import threading
from typing import Dict, Hashable, List, Optional, Tuple

from ratelimiter.bucket import TokenBucket
from ratelimiter.clock import Clock, monotonic_clock
from ratelimiter.config import LimiterSettings
from ratelimiter.errors import require_positive_int

log = logging.getLogger("ratelimiter.registry")

class BucketRegistry:
    """Maps client identifiers to their own ``TokenBucket``.

    Lookups of known clients are lock-free. The creation lock is only taken on a
    miss and the key is checked again under it, so concurrent first requests for
    one client all end up sharing a single bucket. Consuming takes nothing but
    that bucket's lock.
    """
    def __init__(self, capacity: int, refill_rate_per_second: int, clock: Optional[Clock] = None):
        self._capacity = require_positive_int("capacity", capacity)
        self._rate = require_positive_int("refill_rate_per_second", refill_rate_per_second)
        self._clock = clock or monotonic_clock
        self._buckets: Dict[Hashable, TokenBucket] = {}
        self._create_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: LimiterSettings, clock: Optional[Clock] = None) -> "BucketRegistry":
        return cls(settings.capacity, settings.refill_rate_per_second, clock=clock)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def refill_rate_per_second(self) -> int:
        return self._rate

    def allow_request(self, client_id: Hashable) -> bool:
        """Admit (True) or reject (False) one request from ``client_id``."""
        return self.try_consume(client_id, 1)

    def try_consume(self, client_id: Hashable, amount: int = 1) -> bool:
        return self.decide(client_id, amount)[0]

    def decide(self, client_id: Hashable, amount: int = 1) -> Tuple[bool, int]:
        """Admission decision plus the tokens left right after it."""
        allowed, remaining = self._get_or_create(client_id).consume(amount)
        if not allowed:
            log.debug("request denied", extra={"client_id": client_id, "allowed": False, "event": "deny"})
        return allowed, remaining

    def available(self, client_id: Hashable) -> int | None:
        bucket = self._buckets.get(client_id)
        if bucket is None:
            return None
        return bucket.available()

    def client_ids(self) -> List[Hashable]:
        return list(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._buckets

    def _get_or_create(self, client_id: Hashable) -> TokenBucket:
        bucket = self._buckets.get(client_id)
        if bucket is not None:
            return bucket
        with self._create_lock:
            bucket = self._buckets.get(client_id)
            if bucket is None:
                bucket = TokenBucket(self._capacity, self._rate, clock=self._clock)
                self._buckets[client_id] = bucket
                log.debug("bucket created", extra={"client_id": client_id, "event": "bucket_created"})
        return bucket

def configure(capacity: int, refill_rate_per_second: int, clock: Optional[Clock] = None) -> BucketRegistry:
    return BucketRegistry(capacity, refill_rate_per_second, clock=clock)
