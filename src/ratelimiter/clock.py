from __future__ import annotations
import threading
import time
from typing import Callable

# A clock returns monotonic time in integer nanoseconds.
Clock = Callable[[], int]

NANOS_PER_SECOND = 1_000_000_000

def monotonic_clock() -> int:
    return time.monotonic_ns()

class ManualClock:
    """Clock that only moves when told to. Safe to share between threads."""
    def __init__(self, start_ns: int = 0):
        self._now = start_ns
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return self._now

    def advance(self, seconds: float = 0.0, ms: int = 0) -> int:
        delta = int(round(seconds * NANOS_PER_SECOND)) + ms * 1_000_000
        if delta < 0:
            raise ValueError("a monotonic clock cannot move backwards")
        with self._lock:
            self._now += delta
            return self._now

    def set(self, now_ns: int) -> None:
        with self._lock:
            self._now = now_ns
