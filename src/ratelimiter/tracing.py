from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

@dataclass(frozen=True)
class TracingConfig:
    service_name: str
    otlp_endpoint: Optional[str] = None

_provider: Optional[TracerProvider] = None

def build_exporter(cfg: TracingConfig) -> SpanExporter:
    if cfg.otlp_endpoint:
        return OTLPSpanExporter(endpoint=cfg.otlp_endpoint)
    return ConsoleSpanExporter()

def configure_tracing(cfg: TracingConfig) -> TracerProvider:
    """Install the global provider once; later calls return the same one."""
    global _provider
    if _provider is not None:
        return _provider

    resource = Resource.create({"service.name": cfg.service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(build_exporter(cfg)))

    trace.set_tracer_provider(provider)
    _provider = provider
    return provider

def flush_tracing(timeout_ms: int = 30_000) -> bool:
    # Pushes pending batches out before a short-lived CLI process exits.
    # The provider stays usable, so a second simulation in the same process still exports.
    if _provider is None:
        return True
    return _provider.force_flush(timeout_ms)

def get_tracer(name: str = "ratelimiter") -> trace.Tracer:
    return trace.get_tracer(name)
