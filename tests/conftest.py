"""Pytest configuration and shared fixtures.

Organization:
    - Environment Fixtures: isolate OTEL_*/TRACING_* variables and caches
    - Tracing Fixtures: in-memory tracer and global state reset
"""

from __future__ import annotations

from collections.abc import Generator

import pytest
from opentelemetry import propagate, trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.test.globals_test import reset_trace_globals

from gcptrace.core.settings import clear_all_caches
from gcptrace.infra.tracing import bootstrap
from gcptrace.infra.tracing.environment import is_running_on_gcp
from gcptrace.infra.tracing.processors import SampleRateAnnotator

_ISOLATED_ENV_VARS = (
    "OTEL_PROPAGATORS",
    "OTEL_RESOURCE_ATTRIBUTES",
    "OTEL_SERVICE_NAME",
    "OTEL_TRACES_SAMPLER",
    "OTEL_TRACES_SAMPLER_ARG",
    "TRACING_EXPORTER",
    "TRACING_SERVICE_NAME",
    "LOG_LEVEL",
)


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path) -> Generator[None]:
    """Run every test without ambient OTEL/TRACING configuration.

    Config directories point at an empty temporary directory so local
    conf/*.yaml files never leak into tests.
    """
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TRACING_CONFIG_DIR", str(tmp_path / "conf"))
    monkeypatch.setenv("LOGGING_CONFIG_DIR", str(tmp_path / "conf"))

    clear_all_caches()
    is_running_on_gcp.cache_clear()
    yield
    clear_all_caches()
    is_running_on_gcp.cache_clear()


# ============================================================================
# Tracing Fixtures
# ============================================================================


@pytest.fixture
def memory_exporter() -> InMemorySpanExporter:
    """In-memory exporter collecting finished spans."""
    return InMemorySpanExporter()


@pytest.fixture
def annotated_tracer(memory_exporter):
    """Tracer from a local (non-global) provider with the SampleRate annotator.

    Finished spans are exported synchronously to ``memory_exporter``.

    Example:
        def test_span(annotated_tracer, memory_exporter):
            with annotated_tracer.start_as_current_span("op"):
                pass
            assert memory_exporter.get_finished_spans()[0].name == "op"
    """
    provider = TracerProvider()
    provider.add_span_processor(SampleRateAnnotator())
    provider.add_span_processor(SimpleSpanProcessor(memory_exporter))
    yield provider.get_tracer(__name__)
    provider.shutdown()


@pytest.fixture
def reset_tracing(monkeypatch) -> Generator[None]:
    """Reset the global tracer provider, propagator and bootstrap guard.

    The global tracer provider can only be set once per process, so tests
    that call init_tracing() must use this fixture.
    """
    original_propagator = propagate.get_global_textmap()
    reset_trace_globals()
    monkeypatch.setattr(bootstrap, "_state", None)
    yield
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()
    reset_trace_globals()
    propagate.set_global_textmap(original_propagator)
