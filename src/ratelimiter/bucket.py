from __future__ import annotations
import threading
from typing import Optional, Tuple

from ratelimiter.clock import Clock, NANOS_PER_SECOND, monotonic_clock
from ratelimiter.errors import require_positive_int

class TokenBucket:
    """Token bucket for a single client.

    Tokens are whole integers. Refill happens lazily on each call: the number of
    tokens earned since ``last_refill`` is truncated toward zero, and the baseline
    only moves forward when at least one token was actually added. Elapsed time
    worth less than a token is therefore measured again from the same baseline
    next time instead of being dropped.
    """
    def __init__(self, capacity: int, refill_rate_per_second: int, clock: Optional[Clock] = None):
        self._capacity = require_positive_int("capacity", capacity)
        self._rate = require_positive_int("refill_rate_per_second", refill_rate_per_second)
        self._clock = clock or monotonic_clock
        self._tokens = self._capacity
        self._last_refill = self._clock()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def refill_rate_per_second(self) -> int:
        return self._rate

    @property
    def last_refill(self) -> int:
        return self._last_refill

    def try_consume(self, amount: int = 1) -> bool:
        """Take ``amount`` tokens if available. Never waits."""
        return self.consume(amount)[0]

    def consume(self, amount: int = 1) -> Tuple[bool, int]:
        """Like ``try_consume`` but also returns the tokens left, read under the same lock."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValueError(f"amount must be a positive integer, got {amount!r}")
        with self._lock:
            self._refill(self._clock())
            if self._tokens >= amount:
                self._tokens -= amount
                return True, self._tokens
            return False, self._tokens

    def available(self) -> int:
        """Current token count after the lazy refill, without consuming."""
        with self._lock:
            self._refill(self._clock())
            return self._tokens

    def _refill(self, now: int) -> None:
        # Must be called under self._lock.
        elapsed = now - self._last_refill
        if elapsed <= 0:
            return
        to_add = elapsed * self._rate // NANOS_PER_SECOND
        if to_add > 0:
            self._tokens = min(self._capacity, self._tokens + to_add)
            self._last_refill = now

    def __repr__(self) -> str:
        return f"TokenBucket(capacity={self._capacity}, refill_rate_per_second={self._rate}, tokens={self._tokens})"
