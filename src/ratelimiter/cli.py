from __future__ import annotations
from typing import Optional
import typer
from rich import print

from ratelimiter.config import get_settings
from ratelimiter.logging import configure_logging
from ratelimiter.tracing import configure_tracing, flush_tracing, TracingConfig
from ratelimiter.registry import BucketRegistry
from ratelimiter.simulate import SimulationConfig, run_simulation

app = typer.Typer(add_completion=False)

def _verdict(allowed: bool) -> str:
    return "[bold green]ALLOWED[/bold green]" if allowed else "[bold red]DENIED[/bold red]"

@app.command()
def simulate(
    capacity: Optional[int] = typer.Option(None, min=1, help="Bucket capacity (default RATELIMIT_CAPACITY)."),
    rate: Optional[int] = typer.Option(None, min=1, help="Refill tokens per second (default RATELIMIT_REFILL_RATE_PER_SECOND)."),
    burst: Optional[int] = typer.Option(None, min=1, help="Requests in the first wave."),
    followup: Optional[int] = typer.Option(None, min=0, help="Requests after the pause."),
    pause: Optional[float] = typer.Option(None, min=0.0, help="Seconds to wait between waves."),
    workers: Optional[int] = typer.Option(None, min=1, help="Worker threads."),
) -> None:
    """Fire concurrent requests for one client and show which were admitted."""
    s = get_settings()
    configure_logging()
    configure_tracing(TracingConfig(service_name=s.service_name, otlp_endpoint=s.otlp_endpoint))

    registry = BucketRegistry(
        capacity if capacity is not None else s.capacity,
        rate if rate is not None else s.refill_rate_per_second,
    )
    base = SimulationConfig.from_settings(s)
    cfg = SimulationConfig(
        client_id=base.client_id,
        workers=workers if workers is not None else base.workers,
        burst=burst if burst is not None else base.burst,
        followup=followup if followup is not None else base.followup,
        pause_s=pause if pause is not None else base.pause_s,
        max_jitter_ms=base.max_jitter_ms,
    )

    print(f"Simulating {cfg.client_id}: capacity={registry.capacity} rate={registry.refill_rate_per_second}/s")
    try:
        report = run_simulation(registry, cfg)
    finally:
        flush_tracing()

    last_phase = None
    for d in report.decisions:
        if d.phase != last_phase:
            print(f"\n--- {d.phase} ---")
            last_phase = d.phase
        print(f"Request {_verdict(d.allowed)} at {d.elapsed_ms}ms")
    print(f"\nallowed={report.stats.allowed} denied={report.stats.denied} total={report.stats.total}")

@app.command()
def check(
    client_id: str,
    count: int = typer.Option(1, min=1, help="Number of back-to-back requests."),
    capacity: Optional[int] = typer.Option(None, min=1),
    rate: Optional[int] = typer.Option(None, min=1),
) -> None:
    """Issue COUNT immediate requests for CLIENT_ID against a fresh registry."""
    s = get_settings()
    registry = BucketRegistry(
        capacity if capacity is not None else s.capacity,
        rate if rate is not None else s.refill_rate_per_second,
    )
    for i in range(1, count + 1):
        print(f"{i}: {_verdict(registry.allow_request(client_id))}")
    print(f"remaining={registry.available(client_id)}")

if __name__ == "__main__":
    app()
