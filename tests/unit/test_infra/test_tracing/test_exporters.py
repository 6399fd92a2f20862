"""Unit tests for span exporter selection."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import DefaultCredentialsError
from opentelemetry.instrumentation.utils import is_instrumentation_enabled
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SpanExportResult

from gcptrace.core.exceptions import ExporterSetupError
from gcptrace.core.settings import TracingSettings
from gcptrace.infra.tracing.exporters import (
    SelfTelemetrySuppressingExporter,
    create_console_exporter,
    create_span_exporter,
)

CLOUD_TRACE_EXPORTER = "opentelemetry.exporter.cloud_trace.CloudTraceSpanExporter"


def _finished_span(name: str = "op"):
    provider = TracerProvider()
    span = provider.get_tracer(__name__).start_span(name)
    span.set_attribute("SampleRate", "0.25")
    span.end()
    return span


@pytest.mark.unit
class TestCreateSpanExporter:
    """Test suite for create_span_exporter."""

    def test_auto_off_gcp_selects_console(self):
        """Test that the console exporter is used outside Google Cloud."""
        exporter = create_span_exporter(TracingSettings(), on_gcp=False)

        assert isinstance(exporter, ConsoleSpanExporter)

    def test_auto_checks_environment_when_not_given(self):
        """Test that the metadata check decides when on_gcp is omitted."""
        with (
            patch("gcptrace.infra.tracing.exporters.is_running_on_gcp", return_value=True) as on_gcp_check,
            patch(CLOUD_TRACE_EXPORTER) as cloud_trace,
        ):
            exporter = create_span_exporter(TracingSettings(gcp_project_id="demo-project"))

        on_gcp_check.assert_called_once_with(timeout=5.0)
        cloud_trace.assert_called_once_with(project_id="demo-project")
        assert isinstance(exporter, SelfTelemetrySuppressingExporter)
        assert exporter.exporter is cloud_trace.return_value

    def test_metadata_check_uses_given_timeout(self):
        """Test that an explicit timeout bounds the metadata check."""
        with patch("gcptrace.infra.tracing.exporters.is_running_on_gcp", return_value=False) as on_gcp_check:
            create_span_exporter(TracingSettings(setup_timeout=2.0), timeout=0.2)

        on_gcp_check.assert_called_once_with(timeout=0.2)

    def test_forced_console_skips_metadata_check(self):
        """Test that exporter=console never asks the metadata server."""
        with patch("gcptrace.infra.tracing.exporters.is_running_on_gcp") as on_gcp_check:
            exporter = create_span_exporter(TracingSettings(exporter="console"))

        on_gcp_check.assert_not_called()
        assert isinstance(exporter, ConsoleSpanExporter)

    def test_forced_cloud_trace_ignores_metadata_check(self):
        """Test that exporter=cloud_trace wins over on_gcp=False."""
        with patch(CLOUD_TRACE_EXPORTER) as cloud_trace:
            exporter = create_span_exporter(TracingSettings(exporter="cloud_trace"), on_gcp=False)

        cloud_trace.assert_called_once_with(project_id=None)
        assert isinstance(exporter, SelfTelemetrySuppressingExporter)

    def test_cloud_trace_failure_raises_setup_error(self):
        """Test that exporter construction failures are wrapped."""
        with patch(CLOUD_TRACE_EXPORTER, side_effect=DefaultCredentialsError("no credentials")):
            with pytest.raises(ExporterSetupError) as exc_info:
                create_span_exporter(TracingSettings(), on_gcp=True)

        error = exc_info.value
        assert error.exporter == "cloud_trace"
        assert error.extra["error_type"] == "DefaultCredentialsError"
        assert isinstance(error.__cause__, DefaultCredentialsError)


@pytest.mark.unit
class TestConsoleExporter:
    """Test suite for the local human-readable exporter."""

    def test_writes_indented_json_to_stdout(self, capsys):
        """Test that spans are pretty-printed on stdout."""
        exporter = create_console_exporter(indent=4)

        result = exporter.export([_finished_span("checkout")])

        out = capsys.readouterr().out
        assert result == SpanExportResult.SUCCESS
        assert "\n    " in out
        payload = json.loads(out)
        assert payload["name"] == "checkout"
        assert payload["attributes"]["SampleRate"] == "0.25"

    def test_console_is_not_wrapped(self):
        """Test that the stream exporter is not treated as self-instrumenting."""
        exporter = create_span_exporter(TracingSettings(exporter="console"))

        assert not isinstance(exporter, SelfTelemetrySuppressingExporter)


@pytest.mark.unit
class TestSelfTelemetrySuppressingExporter:
    """Test suite for SelfTelemetrySuppressingExporter."""

    def test_export_runs_with_instrumentation_suppressed(self):
        """Test that instrumentation is disabled during export only."""
        seen: list[bool] = []
        inner = MagicMock()
        inner.export.side_effect = lambda spans: seen.append(is_instrumentation_enabled()) or SpanExportResult.SUCCESS

        result = SelfTelemetrySuppressingExporter(inner).export([_finished_span()])

        assert result == SpanExportResult.SUCCESS
        assert seen == [False]
        assert is_instrumentation_enabled() is True

    def test_force_flush_delegates(self):
        """Test that force_flush forwards the timeout and result."""
        inner = MagicMock()
        inner.force_flush.return_value = False

        assert SelfTelemetrySuppressingExporter(inner).force_flush(1234) is False
        inner.force_flush.assert_called_once_with(1234)

    def test_shutdown_delegates(self):
        """Test that shutdown reaches the wrapped exporter."""
        inner = MagicMock()

        SelfTelemetrySuppressingExporter(inner).shutdown()

        inner.shutdown.assert_called_once_with()

    def test_export_failure_propagates(self):
        """Test that export errors reach the batch processor unchanged."""
        inner = MagicMock()
        inner.export.side_effect = ConnectionError("unavailable")

        with pytest.raises(ConnectionError):
            SelfTelemetrySuppressingExporter(inner).export([_finished_span()])
        assert is_instrumentation_enabled() is True
