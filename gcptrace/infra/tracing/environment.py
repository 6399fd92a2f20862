"""Execution environment detection.

google-auth exposes its metadata server check only through the private
``google.auth.compute_engine._metadata`` module. ``is_on_gce`` there has no
timeout argument, so the check is rebuilt from ``ping`` and
``detect_gce_residency_linux`` to keep it within the setup timeout. The
google-auth major version is pinned for that reason.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from google.auth.compute_engine import _metadata
from google.auth.transport.requests import Request

logger = logging.getLogger(__name__)

DEFAULT_METADATA_TIMEOUT = 3.0


@lru_cache(maxsize=None)
def is_running_on_gcp(timeout: float | None = None) -> bool:
    """Report whether the process runs on Google Cloud.

    Pings the GCE metadata server once (honouring GCE_METADATA_IP) and
    falls back to BIOS residency detection on Linux. The answer is cached
    for the life of the process; call ``is_running_on_gcp.cache_clear()``
    in tests.

    Args:
        timeout: Seconds allowed for the metadata server to answer.
    """
    timeout = DEFAULT_METADATA_TIMEOUT if timeout is None else timeout
    on_gcp = bool(_metadata.ping(Request(), timeout=timeout, retry_count=1))
    if not on_gcp and os.name != "nt":
        on_gcp = bool(_metadata.detect_gce_residency_linux())
    logger.debug("GCP metadata check finished", extra={"on_gcp": on_gcp, "timeout": timeout})
    return on_gcp
