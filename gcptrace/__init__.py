"""Tracing bootstrap for services running on, or next to, Google Cloud.

    from gcptrace import init_tracing

    shutdown = init_tracing()
    ...
    shutdown()
"""

from gcptrace.core.exceptions import (
    ExporterSetupError,
    ResourceDetectionError,
    TracingAlreadyInitializedError,
    TracingError,
    TracingSetupError,
)
from gcptrace.infra.tracing import (
    SAMPLE_RATE_KEY,
    SampleRateAnnotator,
    get_sample_rate,
    init_tracing,
    is_tracing_initialized,
    set_sample_rate,
    with_id_generator,
    with_resource,
    with_sampler,
    with_shutdown_on_exit,
    with_span_limits,
    with_span_processor,
)

__version__ = "0.1.0"

__all__ = [
    "SAMPLE_RATE_KEY",
    "ExporterSetupError",
    "ResourceDetectionError",
    "SampleRateAnnotator",
    "TracingAlreadyInitializedError",
    "TracingError",
    "TracingSetupError",
    "get_sample_rate",
    "init_tracing",
    "is_tracing_initialized",
    "set_sample_rate",
    "with_id_generator",
    "with_resource",
    "with_sampler",
    "with_shutdown_on_exit",
    "with_span_limits",
    "with_span_processor",
]
