"""Span processors that annotate spans from request baggage.

The sampling rate of a request is decided upstream (for example by a routing
layer) and carried in the ``SampleRate`` baggage member. Every span started
while that member is in context gets a ``SampleRate`` string attribute, so
trace volume can later be compared against the configured rate without any
span-creation call site knowing about sampling.

Example:
    from opentelemetry import context, trace
    from gcptrace.infra.tracing.processors import set_sample_rate

    token = context.attach(set_sample_rate("0.25"))
    try:
        with trace.get_tracer(__name__).start_as_current_span("handle"):
            ...  # span carries SampleRate="0.25"
    finally:
        context.detach(token)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from opentelemetry import baggage
from opentelemetry.sdk.trace import SpanProcessor

if TYPE_CHECKING:
    from opentelemetry.context import Context
    from opentelemetry.sdk.trace import ReadableSpan, Span

SAMPLE_RATE_KEY = "SampleRate"


class SampleRateAnnotator(SpanProcessor):
    """Copy the ``SampleRate`` baggage member onto every started span.

    Holds no state, so a single instance is safe to share between threads.
    """

    def on_start(self, span: Span, parent_context: Context | None = None) -> None:
        """Set the ``SampleRate`` attribute when the baggage carries one.

        Args:
            span: The span being started.
            parent_context: Context the span was started with. The current
                context is used when None.
        """
        value = baggage.get_baggage(SAMPLE_RATE_KEY, parent_context)
        if value is None or value == "":
            return
        span.set_attribute(SAMPLE_RATE_KEY, str(value))

    def on_end(self, span: ReadableSpan) -> None:
        pass

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True


def set_sample_rate(rate: str | float, context: Context | None = None) -> Context:
    """Return a context whose baggage carries the given sample rate.

    The returned context is not attached; callers attach it (or pass it to
    ``start_span``) themselves.

    Args:
        rate: Sampling rate decided for the request.
        context: Context to derive from. Defaults to the current context.

    Returns:
        New context with the ``SampleRate`` baggage member set.
    """
    return baggage.set_baggage(SAMPLE_RATE_KEY, str(rate), context)


def get_sample_rate(context: Context | None = None) -> str | None:
    """Return the ``SampleRate`` baggage member, or None when it is absent or empty."""
    value = baggage.get_baggage(SAMPLE_RATE_KEY, context)
    if value is None or value == "":
        return None
    return str(value)
