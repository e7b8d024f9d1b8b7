from __future__ import annotations
import math
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from ratelimiter.config import get_settings
from ratelimiter.logging import configure_logging
from ratelimiter.tracing import configure_tracing, TracingConfig
from ratelimiter.registry import BucketRegistry

app = FastAPI(title="Client Rate Limiter", version="0.1.0")

class DecideRequest(BaseModel):
    client_id: str = Field(min_length=1)

class DecideResponse(BaseModel):
    client_id: str
    allowed: bool
    remaining: int

class LimitedResponse(BaseModel):
    client_id: str
    remaining: int

# Lazy singleton; tests swap the registry through set_registry()
_state = {}

def _init_once() -> BucketRegistry:
    if "registry" in _state:
        return _state["registry"]
    s = get_settings()
    configure_logging()
    configure_tracing(TracingConfig(service_name=s.service_name, otlp_endpoint=s.otlp_endpoint))
    _state["registry"] = BucketRegistry.from_settings(s)
    return _state["registry"]

def set_registry(registry: BucketRegistry | None) -> None:
    _state.clear()
    if registry is not None:
        _state["registry"] = registry

@app.get("/health")
def health():
    return {"status": "ok"}

@app.post("/decide", response_model=DecideResponse)
def decide(req: DecideRequest):
    registry = _init_once()
    allowed, remaining = registry.decide(req.client_id)
    return DecideResponse(client_id=req.client_id, allowed=allowed, remaining=remaining)

@app.get("/limited/{client_id}", response_model=LimitedResponse)
def limited(client_id: str):
    registry = _init_once()
    allowed, remaining = registry.decide(client_id)
    if not allowed:
        # whole seconds until at least one token is back
        retry_after = max(1, math.ceil(1 / registry.refill_rate_per_second))
        raise HTTPException(status_code=429, detail="rate limit exceeded", headers={"Retry-After": str(retry_after)})
    return LimitedResponse(client_id=client_id, remaining=remaining)
