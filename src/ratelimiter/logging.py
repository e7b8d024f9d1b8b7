from __future__ import annotations
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import IO, Any, Optional

from opentelemetry import trace

# Record attributes copied into the JSON line when a caller passes them via ``extra``
EXTRA_FIELDS = ("client_id", "allowed", "component", "event", "trace_id", "span_id")

class TraceContextFilter(logging.Filter):
    """Stamps records with the ids of the active span, if any."""
    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        if ctx.is_valid and not hasattr(record, "trace_id"):
            record.trace_id = format(ctx.trace_id, "032x")
            record.span_id = format(ctx.span_id, "016x")
        return True

class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update({k: getattr(record, k) for k in EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        # client ids are any hashable; fall back to str for the odd ones
        return json.dumps(payload, ensure_ascii=False, default=str)

def configure_logging(level: str | None = None, stream: Optional[IO[str]] = None) -> logging.Handler:
    lvl = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    root = logging.getLogger()
    root.setLevel(lvl)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(TraceContextFilter())

    # Replace existing handlers so repeated CLI/API setup does not double-log
    root.handlers = [handler]
    return handler
