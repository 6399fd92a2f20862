"""Tracer provider options and caller overrides.

``init_tracing`` fills a ``TracerProviderOptions`` with its built-in defaults
and then applies caller overrides in order. An override is any callable that
takes the options and mutates them:

    def use_ratio_sampler(options: TracerProviderOptions) -> None:
        options.sampler = TraceIdRatioBased(0.1)

    init_tracing(use_ratio_sampler, with_span_processor(my_processor))

Span processors are append-only: overrides can add processors after the
built-in ones but cannot remove or reorder them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import SpanLimits, SpanProcessor
    from opentelemetry.sdk.trace.id_generator import IdGenerator
    from opentelemetry.sdk.trace.sampling import Sampler


@dataclass
class TracerProviderOptions:
    """Keyword arguments and span processors for a TracerProvider.

    ``None`` fields are left to the SDK defaults (which honour
    OTEL_TRACES_SAMPLER and the OTEL_SPAN_* limits).
    """

    resource: Resource | None = None
    sampler: Sampler | None = None
    span_limits: SpanLimits | None = None
    id_generator: IdGenerator | None = None
    shutdown_on_exit: bool = False
    _span_processors: list[SpanProcessor] = field(default_factory=list, init=False, repr=False)

    @property
    def span_processors(self) -> tuple[SpanProcessor, ...]:
        return tuple(self._span_processors)

    def add_span_processor(self, processor: SpanProcessor) -> None:
        """Append a span processor after those already registered."""
        self._span_processors.append(processor)

    def provider_kwargs(self) -> dict[str, Any]:
        """Return kwargs for TracerProvider initialization."""
        kwargs: dict[str, Any] = {"shutdown_on_exit": self.shutdown_on_exit}
        if self.resource is not None:
            kwargs["resource"] = self.resource
        if self.sampler is not None:
            kwargs["sampler"] = self.sampler
        if self.span_limits is not None:
            kwargs["span_limits"] = self.span_limits
        if self.id_generator is not None:
            kwargs["id_generator"] = self.id_generator
        return kwargs


ProviderOverride = Callable[[TracerProviderOptions], None]


def apply_overrides(options: TracerProviderOptions, overrides: tuple[ProviderOverride, ...]) -> None:
    """Apply overrides in order, keeping the processors registered before them.

    Raises:
        ValueError: If an override removed or reordered existing processors.
    """
    built_in = options.span_processors
    for override in overrides:
        override(options)
    if options.span_processors[: len(built_in)] != built_in:
        raise ValueError("Provider overrides may add span processors but not remove or reorder them")


def with_sampler(sampler: Sampler) -> ProviderOverride:
    """Use ``sampler`` instead of the SDK default sampler."""

    def _apply(options: TracerProviderOptions) -> None:
        options.sampler = sampler

    return _apply


def with_span_processor(processor: SpanProcessor) -> ProviderOverride:
    """Register an additional span processor after the built-in ones."""

    def _apply(options: TracerProviderOptions) -> None:
        options.add_span_processor(processor)

    return _apply


def with_span_limits(span_limits: SpanLimits) -> ProviderOverride:
    def _apply(options: TracerProviderOptions) -> None:
        options.span_limits = span_limits

    return _apply


def with_id_generator(id_generator: IdGenerator) -> ProviderOverride:
    def _apply(options: TracerProviderOptions) -> None:
        options.id_generator = id_generator

    return _apply


def with_resource(resource: Resource) -> ProviderOverride:
    """Merge ``resource`` onto the detected resource; its attributes win."""

    def _apply(options: TracerProviderOptions) -> None:
        options.resource = resource if options.resource is None else options.resource.merge(resource)

    return _apply


def with_shutdown_on_exit(enabled: bool = True) -> ProviderOverride:
    def _apply(options: TracerProviderOptions) -> None:
        options.shutdown_on_exit = enabled

    return _apply
