"""Logging configuration setup.

Uses logging.config.dictConfig with every handler on the root logger; the
package's module loggers propagate up. The tracing bootstrap never calls
these functions itself: configuring logging is left to the entrypoint.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gcptrace.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from gcptrace.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    log_config = {**log_settings.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    console_enabled: bool = True,
    include_trace_context: bool = True,
    capture_warnings: bool = True,
) -> None:
    """Configure the root logger.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of plain text.
        console_enabled: Attach a stderr handler.
        include_trace_context: Add trace_id, span_id and sample_rate to JSON records.
        capture_warnings: Forward Python warnings to logging system.
    """
    formatters: dict[str, dict[str, Any]] = {
        "plain": {
            "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        },
        "json": {
            "()": "gcptrace.infra.logging.formatters.JSONFormatter",
            "include_trace_context": include_trace_context,
        },
    }

    handlers: dict[str, dict[str, Any]] = {}
    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "json" if json_logs else "plain",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "handlers": handlers,
            "root": {"level": log_level.upper(), "handlers": list(handlers)},
        }
    )
    logging.captureWarnings(capture_warnings)

    logger.debug(
        "Logging configured",
        extra={"level": log_level, "json_logs": json_logs, "console_enabled": console_enabled},
    )
