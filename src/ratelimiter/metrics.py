from __future__ import annotations
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Hashable

@dataclass(frozen=True)
class StatsSnapshot:
    allowed: int = 0
    denied: int = 0
    per_client: Dict[Hashable, Dict[str, int]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.allowed + self.denied

class DecisionStats:
    """Thread-safe allow/deny tally, overall and per client."""
    def __init__(self):
        self._allowed: Counter = Counter()
        self._denied: Counter = Counter()
        self._lock = threading.Lock()

    def record(self, client_id: Hashable, allowed: bool) -> None:
        with self._lock:
            if allowed:
                self._allowed[client_id] += 1
            else:
                self._denied[client_id] += 1

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            clients = set(self._allowed) | set(self._denied)
            per_client = {c: {"allowed": self._allowed[c], "denied": self._denied[c]} for c in clients}
            return StatsSnapshot(
                allowed=sum(self._allowed.values()),
                denied=sum(self._denied.values()),
                per_client=per_client,
            )
