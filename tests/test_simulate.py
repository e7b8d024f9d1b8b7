import random
from ratelimiter.clock import ManualClock
from ratelimiter.registry import configure
from ratelimiter.simulate import SimulationConfig, run_simulation

def test_burst_pause_followup():
    clock = ManualClock()
    registry = configure(10, 5, clock=clock)
    cfg = SimulationConfig(client_id="client-1", workers=10, burst=20, followup=10, pause_s=2.0, max_jitter_ms=0)
    sleeps = []

    def fake_sleep(s):
        sleeps.append(s)
        clock.advance(seconds=s)

    report = run_simulation(registry, cfg, sleep=fake_sleep, clock=clock, rng=random.Random(7))
    burst = report.phase("burst")
    followup = report.phase("followup")
    assert sum(d.allowed for d in burst) == 10
    assert all(d.allowed for d in followup)
    assert followup[0].elapsed_ms == 2000
    assert sleeps == [2.0]
    assert report.stats.allowed == 20
    assert report.stats.denied == 10
    assert report.stats.per_client["client-1"] == {"allowed": 20, "denied": 10}

def test_no_followup_skips_pause():
    clock = ManualClock()
    registry = configure(3, 1, clock=clock)
    cfg = SimulationConfig(burst=5, followup=0, pause_s=5.0, max_jitter_ms=0, workers=2)
    report = run_simulation(registry, cfg, sleep=lambda s: clock.advance(seconds=s), clock=clock)
    assert report.stats.total == 5
    assert report.stats.allowed == 3
    assert clock() == 0
