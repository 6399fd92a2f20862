"""OpenTelemetry tracing configuration."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_tracing_yaml_source

ExporterChoice = Literal["auto", "console", "cloud_trace"]


class TracingSettings(BaseSettings):
    """Distributed tracing bootstrap settings.

    Environment variables use TRACING_ prefix.
    Example: TRACING_EXPORTER=console, TRACING_GCP_PROJECT_ID=my-project

    Standard OpenTelemetry variables (OTEL_SERVICE_NAME,
    OTEL_RESOURCE_ATTRIBUTES, OTEL_PROPAGATORS, OTEL_TRACES_SAMPLER) are read
    by the SDK itself and are not duplicated here.
    """

    # ──────────────────────────────────────────────────────────────
    # Service identification (merged into the detected resource)
    # ──────────────────────────────────────────────────────────────

    service_name: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="service.name resource attribute (OTEL_SERVICE_NAME wins when set)",
    )

    service_version: str | None = Field(
        default=None,
        min_length=1,
        max_length=50,
        description="service.version resource attribute",
    )

    service_namespace: str | None = Field(
        default=None,
        max_length=100,
        description="service.namespace resource attribute",
    )

    environment: str | None = Field(
        default=None,
        max_length=50,
        description="deployment.environment resource attribute",
    )

    # ──────────────────────────────────────────────────────────────
    # Exporter selection
    # ──────────────────────────────────────────────────────────────

    exporter: ExporterChoice = Field(
        default="auto",
        description="Span exporter: auto (ask the GCP metadata server), console, or cloud_trace",
    )

    gcp_project_id: str | None = Field(
        default=None,
        description="Cloud Trace project; Application Default Credentials decide when unset",
    )

    console_indent: int = Field(
        default=4,
        ge=0,
        le=8,
        description="JSON indent used by the local console exporter",
    )

    # ──────────────────────────────────────────────────────────────
    # Setup and export timeouts
    # ──────────────────────────────────────────────────────────────

    setup_timeout: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Maximum time (seconds) for resource detection during setup",
    )

    export_timeout: int = Field(
        default=30,
        ge=1,
        le=120,
        description="Maximum time (seconds) to wait for an export to complete",
    )

    # ──────────────────────────────────────────────────────────────
    # Batch processor settings
    # ──────────────────────────────────────────────────────────────

    batch_schedule_delay: int = Field(
        default=5000,
        ge=100,
        le=60000,
        description="Maximum time (ms) to wait before exporting a batch of spans",
    )

    batch_max_export_batch_size: int = Field(
        default=512,
        ge=1,
        le=2048,
        description="Maximum number of spans to export in a single batch",
    )

    batch_max_queue_size: int = Field(
        default=2048,
        ge=1,
        le=8192,
        description="Maximum queue size for pending spans before dropping",
    )

    shutdown_on_exit: bool = Field(
        default=False,
        description="Register an atexit hook that shuts the tracer provider down",
    )

    @model_validator(mode="after")
    def validate_batch_fits_queue(self) -> TracingSettings:
        """Validate that a single export batch fits in the span queue."""
        if self.batch_max_export_batch_size > self.batch_max_queue_size:
            raise ValueError(
                "batch_max_export_batch_size must be less than or equal to batch_max_queue_size"
            )
        return self

    def batch_processor_kwargs(self) -> dict[str, Any]:
        """Return kwargs for BatchSpanProcessor initialization.

        Returns:
            Dictionary suitable for unpacking into BatchSpanProcessor(exporter, **kwargs).
        """
        return {
            "schedule_delay_millis": self.batch_schedule_delay,
            "max_export_batch_size": self.batch_max_export_batch_size,
            "max_queue_size": self.batch_max_queue_size,
            "export_timeout_millis": self.export_timeout * 1000,
        }

    def resource_attributes(self) -> dict[str, str]:
        """Build resource attributes from the configured service identity.

        Only fields that were actually set are included, so SDK defaults and
        OTEL_* environment variables still apply to the rest.
        """
        attrs: dict[str, str] = {}
        if self.service_name:
            attrs["service.name"] = self.service_name
        if self.service_version:
            attrs["service.version"] = self.service_version
        if self.service_namespace:
            attrs["service.namespace"] = self.service_namespace
        if self.environment:
            attrs["deployment.environment"] = self.environment
        return attrs

    model_config = SettingsConfigDict(
        env_prefix="TRACING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_tracing_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
