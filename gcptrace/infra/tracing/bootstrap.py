"""OpenTelemetry tracing bootstrap.

Builds the tracer provider for the service and installs it, together with
the context propagator, as process-wide globals:

- Resource from Google Cloud detection, the telemetry SDK and OTEL_* env vars
- ``SampleRateAnnotator`` copying the SampleRate baggage member onto spans
- Batch span processor feeding Cloud Trace on Google Cloud, stdout elsewhere
- Caller overrides applied after the defaults
- Composite propagator from OTEL_PROPAGATORS

Tracing is initialized once per process, at startup, before request traffic
begins:

    from gcptrace import init_tracing

    shutdown = init_tracing()
    try:
        serve()
    finally:
        shutdown()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from gcptrace.core.exceptions import TracingAlreadyInitializedError
from gcptrace.core.settings import get_tracing_settings
from gcptrace.infra.tracing.exporters import create_span_exporter
from gcptrace.infra.tracing.options import (
    ProviderOverride,
    TracerProviderOptions,
    apply_overrides,
)
from gcptrace.infra.tracing.processors import SampleRateAnnotator
from gcptrace.infra.tracing.propagation import build_propagator, install_propagator
from gcptrace.infra.tracing.resources import detect_resource

if TYPE_CHECKING:
    from opentelemetry.propagators.textmap import TextMapPropagator

    from gcptrace.core.settings.tracing import TracingSettings

logger = logging.getLogger(__name__)


@dataclass
class _TracingState:
    provider: TracerProvider
    propagator: TextMapPropagator
    shut_down: bool = False


_lock = threading.Lock()
_state: _TracingState | None = None


def is_tracing_initialized() -> bool:
    """Return True once ``init_tracing`` has installed a provider."""
    return _state is not None


def init_tracing(
    *overrides: ProviderOverride,
    settings: TracingSettings | None = None,
    timeout: float | None = None,
) -> Callable[[], None]:
    """Configure OpenTelemetry tracing for the process.

    Sets up:
    - Resource detection (Google Cloud, telemetry SDK, environment)
    - Span exporter selection (Cloud Trace on Google Cloud, console otherwise)
    - TracerProvider with the SampleRate annotator and a batch processor
    - Global tracer provider and text map propagator

    Nothing global is modified unless every step succeeds.

    Args:
        *overrides: Callables applied to the provider options after the
            built-in defaults. They may add span processors, change the
            sampler, limits or id generator, or extend the resource.
        settings: Tracing settings. Defaults to ``get_tracing_settings()``.
        timeout: Seconds allowed for resource detection and for the
            Google Cloud metadata check, each. Defaults to
            ``settings.setup_timeout``. Has no effect on the provider once
            it is running.

    Returns:
        A no-argument function that flushes and shuts the provider down.
        It never raises and is safe to call more than once.

    Raises:
        TracingAlreadyInitializedError: If tracing was already initialized,
            or another tracer provider is already installed globally.
        ResourceDetectionError: If resource detection fails.
        ExporterSetupError: If the span exporter cannot be constructed.
        ValueError: If an override removed built-in span processors.
    """
    global _state

    settings = settings or get_tracing_settings()

    with _lock:
        if _state is not None:
            raise TracingAlreadyInitializedError()
        current = trace.get_tracer_provider()
        if not isinstance(current, trace.ProxyTracerProvider):
            raise TracingAlreadyInitializedError(
                detail="A global tracer provider is already installed",
                extra={"provider": type(current).__name__},
            )

        resource = detect_resource(settings, timeout=timeout)
        exporter = create_span_exporter(settings, timeout=timeout)

        options = TracerProviderOptions(
            resource=resource,
            shutdown_on_exit=settings.shutdown_on_exit,
        )
        options.add_span_processor(SampleRateAnnotator())
        batch_processor = BatchSpanProcessor(exporter, **settings.batch_processor_kwargs())
        options.add_span_processor(batch_processor)

        try:
            apply_overrides(options, overrides)
            provider = TracerProvider(**options.provider_kwargs())
            for processor in options.span_processors:
                provider.add_span_processor(processor)
            propagator = build_propagator()
        except Exception:
            batch_processor.shutdown()
            raise

        trace.set_tracer_provider(provider)
        install_propagator(propagator)
        state = _TracingState(provider=provider, propagator=propagator)
        _state = state

    logger.info(
        "OpenTelemetry tracing configured",
        extra={
            "service": resource.attributes.get("service.name"),
            "exporter": type(exporter).__name__,
            "span_processors": len(options.span_processors),
            "overrides": len(overrides),
        },
    )
    return _shutdown_handle(state)


def _shutdown_handle(state: _TracingState) -> Callable[[], None]:
    def shutdown() -> None:
        with _lock:
            if state.shut_down:
                return
            state.shut_down = True
        try:
            state.provider.shutdown()
        except Exception as e:
            logger.warning(
                f"Tracer provider shutdown failed: {e}",
                extra={"exception": str(e)},
            )
            return
        logger.info("OpenTelemetry tracing shut down")

    return shutdown
