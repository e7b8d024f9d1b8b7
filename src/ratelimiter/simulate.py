from __future__ import annotations
import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Hashable, List, Optional

from ratelimiter.clock import Clock, monotonic_clock
from ratelimiter.config import LimiterSettings
from ratelimiter.metrics import DecisionStats, StatsSnapshot
from ratelimiter.registry import BucketRegistry
from ratelimiter.tracing import get_tracer

log = logging.getLogger("ratelimiter.simulate")
tracer = get_tracer("ratelimiter.simulate")

@dataclass(frozen=True)
class SimulationConfig:
    client_id: Hashable = "client-1"
    workers: int = 10
    burst: int = 20
    followup: int = 10
    pause_s: float = 2.0
    max_jitter_ms: int = 50

    @classmethod
    def from_settings(cls, s: LimiterSettings) -> "SimulationConfig":
        return cls(
            client_id=s.sim_client_id,
            workers=s.sim_workers,
            burst=s.sim_burst,
            followup=s.sim_followup,
            pause_s=s.sim_pause_s,
            max_jitter_ms=s.sim_max_jitter_ms,
        )

@dataclass(frozen=True)
class Decision:
    phase: str
    allowed: bool
    elapsed_ms: int

@dataclass
class SimulationReport:
    decisions: List[Decision] = field(default_factory=list)
    stats: StatsSnapshot = field(default_factory=StatsSnapshot)

    def phase(self, name: str) -> List[Decision]:
        return [d for d in self.decisions if d.phase == name]

def run_simulation(
    registry: BucketRegistry,
    cfg: SimulationConfig,
    sleep: Callable[[float], None] = time.sleep,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> SimulationReport:
    """Drive a burst, a pause, then a follow-up wave of requests for one client."""
    clock = clock or monotonic_clock
    rng = rng or random.Random()
    stats = DecisionStats()
    decisions: List[Decision] = []
    start = clock()

    def _request(phase: str, jitter_s: float) -> Decision:
        allowed = registry.allow_request(cfg.client_id)
        d = Decision(phase=phase, allowed=allowed, elapsed_ms=(clock() - start) // 1_000_000)
        stats.record(cfg.client_id, allowed)
        if jitter_s > 0:
            sleep(jitter_s)
        return d

    def _wave(pool: ThreadPoolExecutor, phase: str, n: int) -> List[Decision]:
        with tracer.start_as_current_span(f"simulate.{phase}") as span:
            span.set_attribute("client_id", str(cfg.client_id))
            span.set_attribute("requests", n)
            # Draw jitter up front; random.Random is not meant to be shared across threads
            jitters = [rng.uniform(0, cfg.max_jitter_ms) / 1000.0 for _ in range(n)]
            futures = [pool.submit(_request, phase, j) for j in jitters]
            wait(futures)
            out = [f.result() for f in futures]
            span.set_attribute("allowed", sum(1 for d in out if d.allowed))
            return out

    with ThreadPoolExecutor(max_workers=cfg.workers, thread_name_prefix="ratelimit-sim") as pool:
        log.info("burst started", extra={"client_id": cfg.client_id, "event": "sim_burst"})
        decisions.extend(_wave(pool, "burst", cfg.burst))
        if cfg.followup:
            if cfg.pause_s > 0:
                sleep(cfg.pause_s)
            log.info("follow-up started", extra={"client_id": cfg.client_id, "event": "sim_followup"})
            decisions.extend(_wave(pool, "followup", cfg.followup))

    report = SimulationReport(decisions=decisions, stats=stats.snapshot())
    log.info(
        "simulation finished allowed=%d denied=%d", report.stats.allowed, report.stats.denied,
        extra={"client_id": cfg.client_id, "event": "sim_done"},
    )
    return report
