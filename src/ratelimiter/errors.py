from __future__ import annotations

class LimiterError(Exception):
    """Base error for the rate limiter."""

class ConfigurationError(LimiterError, ValueError):
    """Raised when a bucket or registry is built with a non-positive capacity or rate."""

def require_positive_int(name: str, value: object) -> int:
    # bool is an int subclass; True must not pass as a capacity of 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be > 0, got {value}")
    return value
