"""Logging infrastructure.

Structured JSONL logging correlated with the active trace:

    from gcptrace.infra.logging import setup_logging
    import logging

    setup_logging()
    logging.getLogger(__name__).info("Started", extra={"port": 8080})
"""

from gcptrace.infra.logging.config import configure_logging, setup_logging
from gcptrace.infra.logging.formatters import JSONFormatter

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "setup_logging",
]
