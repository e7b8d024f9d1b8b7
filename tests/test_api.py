import pytest
from fastapi.testclient import TestClient
from ratelimiter import api
from ratelimiter.clock import ManualClock
from ratelimiter.registry import configure

@pytest.fixture
def clock():
    c = ManualClock()
    api.set_registry(configure(2, 1, clock=c))
    yield c
    api.set_registry(None)

def test_health():
    assert TestClient(api.app).get("/health").json() == {"status": "ok"}

def test_decide(clock):
    client = TestClient(api.app)
    bodies = [client.post("/decide", json={"client_id": "k"}).json() for _ in range(3)]
    assert [b["allowed"] for b in bodies] == [True, True, False]
    assert [b["remaining"] for b in bodies] == [1, 0, 0]
    clock.advance(seconds=1)
    assert client.post("/decide", json={"client_id": "k"}).json()["allowed"] is True

def test_decide_rejects_empty_id(clock):
    assert TestClient(api.app).post("/decide", json={"client_id": ""}).status_code == 422

def test_limited_returns_429(clock):
    client = TestClient(api.app)
    assert client.get("/limited/abc").status_code == 200
    assert client.get("/limited/abc").status_code == 200
    resp = client.get("/limited/abc")
    assert resp.status_code == 429
    assert resp.headers["Retry-After"] == "1"
    assert client.get("/limited/other").json() == {"client_id": "other", "remaining": 1}

def test_remaining_comes_from_the_same_decision():
    ticks = iter(range(0, 10**12, 600_000_000))
    api.set_registry(configure(1, 1, clock=lambda: next(ticks)))
    try:
        body = TestClient(api.app).post("/decide", json={"client_id": "k"}).json()
        assert body == {"client_id": "k", "allowed": True, "remaining": 0}
    finally:
        api.set_registry(None)
