"""OpenTelemetry tracing infrastructure.

This package provides distributed tracing setup:
- init_tracing(): Initialize tracing once at startup, returns a shutdown function
- SampleRateAnnotator: Span processor copying SampleRate baggage onto spans
- set_sample_rate() / get_sample_rate(): SampleRate baggage helpers
- create_span_exporter(): Cloud Trace on Google Cloud, console elsewhere
- build_propagator() / install_propagator(): OTEL_PROPAGATORS composite
- with_*(): Provider overrides applied after the built-in defaults
"""

from gcptrace.infra.tracing.bootstrap import init_tracing, is_tracing_initialized
from gcptrace.infra.tracing.environment import is_running_on_gcp
from gcptrace.infra.tracing.exporters import (
    SelfTelemetrySuppressingExporter,
    create_span_exporter,
)
from gcptrace.infra.tracing.options import (
    ProviderOverride,
    TracerProviderOptions,
    with_id_generator,
    with_resource,
    with_sampler,
    with_shutdown_on_exit,
    with_span_limits,
    with_span_processor,
)
from gcptrace.infra.tracing.processors import (
    SAMPLE_RATE_KEY,
    SampleRateAnnotator,
    get_sample_rate,
    set_sample_rate,
)
from gcptrace.infra.tracing.propagation import (
    build_propagator,
    default_propagator,
    install_propagator,
)
from gcptrace.infra.tracing.resources import detect_resource

__all__ = [
    # Core setup
    "init_tracing",
    "is_tracing_initialized",
    # SampleRate annotation
    "SAMPLE_RATE_KEY",
    "SampleRateAnnotator",
    "get_sample_rate",
    "set_sample_rate",
    # Resource and exporter
    "SelfTelemetrySuppressingExporter",
    "create_span_exporter",
    "detect_resource",
    "is_running_on_gcp",
    # Propagation
    "build_propagator",
    "default_propagator",
    "install_propagator",
    # Provider overrides
    "ProviderOverride",
    "TracerProviderOptions",
    "with_id_generator",
    "with_resource",
    "with_sampler",
    "with_shutdown_on_exit",
    "with_span_limits",
    "with_span_processor",
]
