from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class LimiterSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RATELIMIT_", env_file=".env", extra="ignore")

    # Bucket policy, shared by every client
    capacity: int = Field(default=10, gt=0)
    refill_rate_per_second: int = Field(default=5, gt=0)

    # Load simulation
    sim_client_id: str = Field(default="client-1")
    sim_workers: int = Field(default=10, ge=1, le=256)
    sim_burst: int = Field(default=20, ge=1, le=10_000)
    sim_followup: int = Field(default=10, ge=0, le=10_000)
    sim_pause_s: float = Field(default=2.0, ge=0.0, le=60.0)
    sim_max_jitter_ms: int = Field(default=50, ge=0, le=1000)

    # Tracing (OTLP)
    otlp_endpoint: str | None = Field(default=None)
    service_name: str = Field(default="client-rate-limiter")

def get_settings() -> LimiterSettings:
    return LimiterSettings()
