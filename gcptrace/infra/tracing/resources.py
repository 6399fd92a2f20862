"""Runtime resource detection.

The resource attached to every span merges, in increasing precedence:

1. ``Resource.create()``: telemetry SDK attributes, the default
   ``service.name`` and the service identity from settings.
2. Google Cloud platform attributes (GCE, GKE, Cloud Run, Cloud Functions,
   App Engine). Empty when the process is not on Google Cloud.
3. ``OTEL_RESOURCE_ATTRIBUTES`` / ``OTEL_SERVICE_NAME`` from the environment.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from opentelemetry.resourcedetector.gcp_resource_detector import GoogleCloudResourceDetector
from opentelemetry.sdk.resources import (
    OTELResourceDetector,
    Resource,
    ResourceDetector,
    get_aggregated_resources,
)

from gcptrace.core.exceptions import ResourceDetectionError

if TYPE_CHECKING:
    from gcptrace.core.settings.tracing import TracingSettings

logger = logging.getLogger(__name__)


def default_detectors() -> list[ResourceDetector]:
    """Detectors run on top of the initial resource, lowest precedence first.

    All of them raise on failure so that detection either completes or
    aborts as a whole.
    """
    return [
        GoogleCloudResourceDetector(raise_on_error=True),
        OTELResourceDetector(raise_on_error=True),
    ]


def detect_resource(
    settings: TracingSettings,
    timeout: float | None = None,
    detectors: list[ResourceDetector] | None = None,
) -> Resource:
    """Detect the resource describing this process.

    Args:
        settings: Tracing settings supplying the configured service identity.
        timeout: Seconds allowed for detection as a whole. Defaults to
            ``settings.setup_timeout``. A detector still running at the
            deadline is left to finish in the background.
        detectors: Detectors to run instead of ``default_detectors()``.

    Returns:
        Immutable resource shared by every span of the provider.

    Raises:
        ResourceDetectionError: If any detector fails or times out.
    """
    timeout = settings.setup_timeout if timeout is None else timeout
    if detectors is None:
        detectors = default_detectors()

    # get_aggregated_resources joins its detector threads before returning,
    # so the call itself runs in a worker that is abandoned on timeout.
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="resource-detection")
    future = executor.submit(
        get_aggregated_resources,
        detectors,
        initial_resource=Resource.create(settings.resource_attributes()),
        timeout=timeout,
    )
    try:
        resource = future.result(timeout=timeout)
    except TimeoutError as e:
        raise ResourceDetectionError(
            detail=f"Resource detection did not finish within {timeout}s",
            extra={"timeout": timeout, "error_type": type(e).__name__},
        ) from e
    except Exception as e:
        raise ResourceDetectionError(
            detail=f"Failed to detect the runtime resource: {e}",
            extra={"timeout": timeout, "error_type": type(e).__name__},
        ) from e
    finally:
        executor.shutdown(wait=False)

    logger.debug(
        "Runtime resource detected",
        extra={"resource_attributes": dict(resource.attributes)},
    )
    return resource
