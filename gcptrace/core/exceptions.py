"""Exception classes raised by the tracing bootstrap."""

from __future__ import annotations

from typing import Any


class TracingError(Exception):
    """Base tracing exception.

    All custom exceptions should inherit from this class.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier.
        extra: Additional context-specific information about the error.

    Example:
            raise TracingError(
            detail="Tracing could not be configured",
            type="tracing-error",
            extra={"exporter": "cloud_trace"},
        )
    """

    default_type = "tracing-error"

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize tracing exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier. Defaults to the class default.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type or self.default_type
        self.extra = extra or {}
        super().__init__(detail)


class TracingSetupError(TracingError):
    """Raised when tracing initialization cannot complete.

    No global tracer provider or propagator has been installed when this
    is raised.
    """

    default_type = "tracing-setup-failed"


class ResourceDetectionError(TracingSetupError):
    """Raised when the runtime resource cannot be detected."""

    default_type = "resource-detection-failed"

    def __init__(
        self,
        detail: str = "Failed to detect the runtime resource",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, extra=extra)


class ExporterSetupError(TracingSetupError):
    """Raised when the selected span exporter fails to construct."""

    default_type = "exporter-setup-failed"

    def __init__(
        self,
        exporter: str,
        detail: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.exporter = exporter
        merged_extra = {"exporter": exporter}
        if extra:
            merged_extra.update(extra)
        super().__init__(
            detail=detail or f"Failed to create the {exporter} span exporter",
            extra=merged_extra,
        )


class TracingAlreadyInitializedError(TracingError):
    """Raised when tracing is initialized more than once in a process."""

    default_type = "tracing-already-initialized"

    def __init__(
        self,
        detail: str = "Tracing has already been initialized in this process",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, extra=extra)
