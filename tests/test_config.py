import pytest
from pydantic import ValidationError
from ratelimiter.config import LimiterSettings, get_settings

def test_defaults(monkeypatch):
    monkeypatch.delenv("RATELIMIT_CAPACITY", raising=False)
    monkeypatch.delenv("RATELIMIT_REFILL_RATE_PER_SECOND", raising=False)
    s = LimiterSettings(_env_file=None)
    assert s.capacity == 10
    assert s.refill_rate_per_second == 5

def test_env_override(monkeypatch):
    monkeypatch.setenv("RATELIMIT_CAPACITY", "50")
    monkeypatch.setenv("RATELIMIT_REFILL_RATE_PER_SECOND", "20")
    s = get_settings()
    assert (s.capacity, s.refill_rate_per_second) == (50, 20)

def test_non_positive_rejected(monkeypatch):
    monkeypatch.setenv("RATELIMIT_CAPACITY", "0")
    with pytest.raises(ValidationError):
        get_settings()
