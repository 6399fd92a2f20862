"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the
process.

Usage:
    from gcptrace.core.settings.loader import get_tracing_settings

    settings = get_tracing_settings()  # First call: loads and validates
    settings = get_tracing_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    clear_all_caches()

    Or pass explicit values:
    settings = TracingSettings(exporter="console")
"""

from __future__ import annotations

from functools import lru_cache

from .logs import LoggingSettings
from .tracing import TracingSettings


@lru_cache(maxsize=1)
def get_tracing_settings() -> TracingSettings:
    """Get cached tracing settings.

    Returns:
        Validated and frozen TracingSettings instance.
    """
    return TracingSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear all settings caches.

    Useful for testing or when you need to force reload settings.
    """
    get_tracing_settings.cache_clear()
    get_logging_settings.cache_clear()
