"""Cross-process context propagation.

``opentelemetry.propagate`` builds its global composite from the
``OTEL_PROPAGATORS`` environment variable when it is first imported,
resolving every name through the ``opentelemetry_propagator`` entry point
group. Formats such as ``b3``, ``b3multi`` or ``jaeger`` become available as
soon as their packages are installed; an unknown name makes that import
raise ``ValueError``.

When the variable is set, that composite is used as is. When it is unset,
W3C trace context and baggage are installed explicitly.
"""

from __future__ import annotations

import logging
import os

from opentelemetry import propagate
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.environment_variables import OTEL_PROPAGATORS
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)


def default_propagator() -> CompositePropagator:
    """Return the W3C trace context + baggage composite."""
    return CompositePropagator([TraceContextTextMapPropagator(), W3CBaggagePropagator()])


def build_propagator() -> TextMapPropagator:
    """Return the propagator to install.

    Returns:
        The composite ``opentelemetry.propagate`` built from
        ``OTEL_PROPAGATORS`` when the variable is set, otherwise
        ``default_propagator()``.
    """
    if os.environ.get(OTEL_PROPAGATORS):
        logger.debug(
            "Using propagators from environment",
            extra={"env_var": OTEL_PROPAGATORS, "value": os.environ[OTEL_PROPAGATORS]},
        )
        return propagate.get_global_textmap()
    return default_propagator()


def install_propagator(propagator: TextMapPropagator | None = None) -> None:
    """Install the process-wide propagator.

    Replaces any previously installed propagator.

    Args:
        propagator: Propagator to install. Built with ``build_propagator()``
            when None.
    """
    if propagator is None:
        propagator = build_propagator()
    propagate.set_global_textmap(propagator)
    logger.info("Global text map propagator installed", extra={"fields": sorted(propagator.fields)})
