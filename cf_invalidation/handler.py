"""
Invalidation request handler.

Workflow for one event, strictly sequential:
ConfigMap lookup -> CloudFront create -> status polling -> status update.
Nothing is retried here; a failed event is redelivered by the watcher.
"""

import logging
import threading
import time
import uuid
from typing import Callable, Optional

from cf_invalidation.config.resolver import resolve_credentials
from cf_invalidation.config.settings import (
    CLOUDFRONT_STATUS_COMPLETED,
    DEFAULT_POLL_INTERVAL,
    PHASE_COMPLETED,
    PHASE_FAILED,
)
from cf_invalidation.errors import (
    ClusterUnavailableError,
    HandlerError,
    InvalidationError,
    PollCancelledError,
    PollTimeoutError,
    StatusUpdateError,
)
from cf_invalidation.models import Event, Invalidation, InvalidationStatus
from cf_invalidation.providers import CDNProvider, ProviderFactory

logger = logging.getLogger(__name__)

# Not recorded as Failed: the cluster itself is the problem, or the
# operator is stopping while CloudFront keeps working on the invalidation
_UNRECORDABLE_ERRORS = (ClusterUnavailableError, StatusUpdateError, PollCancelledError)


def make_caller_reference(request: Invalidation) -> str:
    """
    Idempotency token for the create call.

    Redelivery of the same resource generation reuses the token, so
    CloudFront returns the existing invalidation instead of creating a
    duplicate. Without a uid a random token is used.
    """
    if request.metadata.uid:
        return f"{request.metadata.uid}-{request.metadata.generation or 0}"
    return uuid.uuid4().hex


def wait_for_completion(
    provider: CDNProvider,
    distribution_id: str,
    invalidation_id: str,
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: Optional[float] = None,
    stop_event: Optional[threading.Event] = None,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """
    Block until the invalidation reports Completed.

    Args:
        provider: CDN provider used for status queries
        distribution_id: Distribution the invalidation belongs to
        invalidation_id: Id returned by the create call
        interval: Seconds to wait before each query
        timeout: Seconds before giving up (None waits forever)
        stop_event: Set to abandon the wait early
        clock: Monotonic clock, replaceable in tests

    Returns:
        Number of status queries performed

    Raises:
        PollInvalidationError: A status query failed (no further queries are made)
        PollTimeoutError: The deadline passed first
        PollCancelledError: stop_event was set
    """
    stop_event = stop_event or threading.Event()
    deadline = None if timeout is None else clock() + timeout
    polls = 0

    while True:
        if stop_event.wait(interval):
            raise PollCancelledError(
                f"stopped while waiting for invalidation {invalidation_id}",
                invalidation_id=invalidation_id,
            )

        polls += 1
        status = provider.get_invalidation_status(distribution_id, invalidation_id)
        if status == CLOUDFRONT_STATUS_COMPLETED:
            return polls

        if deadline is not None and clock() >= deadline:
            raise PollTimeoutError(
                f"invalidation {invalidation_id} still {status} after {timeout}s",
                invalidation_id=invalidation_id,
            )


class Handler:
    """Reacts to Invalidation events"""

    def __init__(
        self,
        kube,
        provider_type: str = 'cloudfront',
        region: Optional[str] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        poll_timeout: Optional[float] = None,
        stop_event: Optional[threading.Event] = None,
        record_failures: bool = True,
        provider_factory: Callable[..., CDNProvider] = ProviderFactory.get_cdn_provider,
    ):
        self.kube = kube
        self.provider_type = provider_type
        self.region = region
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.stop_event = stop_event or threading.Event()
        self.record_failures = record_failures
        self.provider_factory = provider_factory

    def handle(self, event: Event) -> Optional[Invalidation]:
        """
        Handle one event. Objects other than Invalidation, deletions and
        already completed requests are ignored.

        Raises:
            HandlerError: The workflow failed
        """
        request = event.object
        if not isinstance(request, Invalidation):
            return None
        if event.deleted:
            return None
        if request.is_completed():
            logger.debug("%s/%s: Invalidation already completed (id %s)",
                         request.namespace, request.name, request.status.id)
            return None

        try:
            return self.invalidate(request)
        except Exception as e:
            if (self.record_failures and isinstance(e, InvalidationError)
                    and not isinstance(e, _UNRECORDABLE_ERRORS)):
                self._record_failure(request, e)
            raise HandlerError(e) from e

    def invalidate(self, request: Invalidation) -> Invalidation:
        """Run the invalidation workflow for one request and mark it Completed"""
        ns, name = request.namespace, request.name
        logger.info("%s/%s: Received invalidation request", ns, name)

        logger.info("%s/%s: Loading ConfigMap %s", ns, name, request.spec.config_map)
        data = self.kube.read_config_map(ns, request.spec.config_map)
        credentials = resolve_credentials(data)

        provider = self.provider_factory(self.provider_type, credentials, region=self.region)

        logger.info("%s/%s: Submitting invalidation request for %s on %s",
                    ns, name, request.spec.path, credentials.distribution_id)
        invalidation_id = provider.create_invalidation(
            credentials.distribution_id,
            request.spec.path,
            make_caller_reference(request),
        )

        logger.info("%s/%s: Waiting for invalidation %s to complete", ns, name, invalidation_id)
        polls = wait_for_completion(
            provider,
            credentials.distribution_id,
            invalidation_id,
            interval=self.poll_interval,
            timeout=self.poll_timeout,
            stop_event=self.stop_event,
        )

        logger.info("%s/%s: Invalidation %s finished after %d status checks",
                    ns, name, invalidation_id, polls)

        # Mark this invalidation as complete.
        request.status = InvalidationStatus(id=invalidation_id, phase=PHASE_COMPLETED)
        self.kube.update_status(request)
        return request

    def _record_failure(self, request: Invalidation, error: InvalidationError):
        request.status = InvalidationStatus(
            id=error.invalidation_id,
            phase=PHASE_FAILED,
            message=str(error),
        )
        try:
            self.kube.update_status(request)
        except Exception as write_error:
            logger.error("%s/%s: Could not record failure: %s",
                         request.namespace, request.name, write_error)
