"""Logging formatters with trace correlation."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

from gcptrace.infra.tracing.processors import get_sample_rate

# Built-in LogRecord attributes that are not copied as extra fields
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
    }
)


class JSONFormatter(logging.Formatter):
    """JSON Lines (JSONL) formatter with UTC timestamps.

    Each record becomes one JSON object on one line. When a span is active
    the record carries ``trace_id`` and ``span_id`` so logs can be joined to
    traces, and ``sample_rate`` when the SampleRate baggage member is set.
    Fields passed through ``extra=`` are included as top-level keys.

    Example output:
        ```json
        {"level": "INFO", "logger": "gcptrace.infra.tracing.bootstrap", "message": "OpenTelemetry tracing configured", "timestamp": "2025-01-01T00:00:00.123Z", "exporter": "ConsoleSpanExporter"}
        ```
    """

    def __init__(
        self,
        static: dict[str, Any] | None = None,
        include_trace_context: bool = True,
    ) -> None:
        """Initialize JSON formatter.

        Args:
            static: Static fields to include in every log record (e.g., {"service": "api"}).
            include_trace_context: Add trace_id, span_id and sample_rate.
        """
        super().__init__()
        self.static = static or {}
        self.include_trace_context = include_trace_context

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
        }

        if self.include_trace_context:
            ctx = trace.get_current_span().get_span_context()
            if ctx.is_valid:
                data["trace_id"] = format(ctx.trace_id, "032x")
                data["span_id"] = format(ctx.span_id, "016x")
            sample_rate = get_sample_rate()
            if sample_rate is not None:
                data["sample_rate"] = sample_rate

        # Keep JSONL single-line
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info).replace("\n", "\\n")
        if record.stack_info:
            data["stack_trace"] = record.stack_info.replace("\n", "\\n")

        data.update(self.static)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in data:
                data[key] = value

        return json.dumps(data, ensure_ascii=False, default=str)
