"""Span exporter selection.

Two destinations are supported:

- Local development: ``ConsoleSpanExporter`` printing each span as indented
  JSON on stdout.
- Google Cloud: ``CloudTraceSpanExporter`` sending spans to Cloud Trace.

The Cloud Trace exporter talks to the Cloud Trace API through gRPC/HTTP
clients that may themselves be instrumented. Its exports therefore run with
instrumentation suppressed, otherwise every export would produce new spans
that have to be exported in turn. The console exporter only writes to a
stream and is used as is.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from opentelemetry.instrumentation.utils import suppress_instrumentation
from opentelemetry.sdk.trace.export import (
    ConsoleSpanExporter,
    SpanExporter,
    SpanExportResult,
)

from gcptrace.core.exceptions import ExporterSetupError
from gcptrace.infra.tracing.environment import is_running_on_gcp

if TYPE_CHECKING:
    from collections.abc import Sequence

    from opentelemetry.sdk.trace import ReadableSpan

    from gcptrace.core.settings.tracing import TracingSettings

logger = logging.getLogger(__name__)


class SelfTelemetrySuppressingExporter(SpanExporter):
    """Span exporter wrapper that disables instrumentation while exporting.

    Attributes:
        exporter: The wrapped SpanExporter instance.
    """

    def __init__(self, exporter: SpanExporter) -> None:
        self._exporter = exporter

    @property
    def exporter(self) -> SpanExporter:
        return self._exporter

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        """Export spans with instrumentation suppressed.

        Args:
            spans: Sequence of spans to export.

        Returns:
            SpanExportResult from the underlying exporter.
        """
        with suppress_instrumentation():
            return self._exporter.export(spans)

    def shutdown(self) -> None:
        """Shutdown the underlying exporter."""
        with suppress_instrumentation():
            self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Force flush the underlying exporter.

        Args:
            timeout_millis: Timeout in milliseconds.

        Returns:
            True if flush succeeded, False otherwise.
        """
        with suppress_instrumentation():
            return self._exporter.force_flush(timeout_millis)


def create_console_exporter(indent: int = 4) -> ConsoleSpanExporter:
    """Create the human-readable local exporter.

    Args:
        indent: JSON indentation of each printed span.
    """
    return ConsoleSpanExporter(
        out=sys.stdout,
        formatter=lambda span: span.to_json(indent=indent) + "\n",
    )


def create_cloud_trace_exporter(project_id: str | None = None) -> SelfTelemetrySuppressingExporter:
    """Create the Cloud Trace exporter.

    Args:
        project_id: Google Cloud project receiving the spans. When None,
            the project of the Application Default Credentials is used.

    Returns:
        CloudTraceSpanExporter wrapped so its exports are not traced.
    """
    from opentelemetry.exporter.cloud_trace import CloudTraceSpanExporter

    return SelfTelemetrySuppressingExporter(CloudTraceSpanExporter(project_id=project_id))


def create_span_exporter(
    settings: TracingSettings,
    on_gcp: bool | None = None,
    timeout: float | None = None,
) -> SpanExporter:
    """Select and construct the span exporter for this process.

    Args:
        settings: Tracing settings. ``settings.exporter`` forces a
            destination unless it is ``"auto"``.
        on_gcp: Result of the environment check. Checked when None and the
            exporter choice is ``"auto"``.
        timeout: Seconds allowed for the metadata check. Defaults to
            ``settings.setup_timeout``.

    Returns:
        The exporter to feed through a batch span processor.

    Raises:
        ExporterSetupError: If the selected exporter cannot be constructed.
    """
    choice = settings.exporter
    if choice == "auto":
        if on_gcp is None:
            on_gcp = is_running_on_gcp(
                timeout=settings.setup_timeout if timeout is None else timeout
            )
        choice = "cloud_trace" if on_gcp else "console"

    try:
        if choice == "cloud_trace":
            exporter: SpanExporter = create_cloud_trace_exporter(settings.gcp_project_id)
        else:
            exporter = create_console_exporter(settings.console_indent)
    except Exception as e:
        raise ExporterSetupError(
            exporter=choice,
            detail=f"Failed to create the {choice} span exporter: {e}",
            extra={"error_type": type(e).__name__},
        ) from e

    logger.info(
        "Span exporter selected",
        extra={"exporter": choice, "configured": settings.exporter},
    )
    return exporter
