"""
Errors raised while processing an invalidation request.

Every error names the stage that failed. None of them are retried here:
the event dispatcher decides whether to redeliver.
"""

from typing import Optional


class InvalidationError(Exception):
    """Base error for a failed invalidation workflow."""

    stage = 'invalidation'

    def __init__(self, message: str, invalidation_id: Optional[str] = None):
        self.message = message
        self.invalidation_id = invalidation_id
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert to dict for status and CLI output."""
        result = {
            'error': self.stage,
            'message': self.message,
        }
        if self.invalidation_id:
            result['invalidationId'] = self.invalidation_id
        return result


class ClusterUnavailableError(InvalidationError):
    """Raised when no Kubernetes configuration can be loaded."""
    stage = 'cluster-config'


class ConfigNotFoundError(InvalidationError):
    """Raised when the referenced ConfigMap cannot be loaded."""
    stage = 'config-load'


class ConfigKeyMissingError(InvalidationError):
    """Raised when a required ConfigMap key is absent."""
    stage = 'config-key'

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"required key not found: {key}")


class CreateInvalidationError(InvalidationError):
    """Raised when CloudFront rejects the invalidation."""
    stage = 'invalidation-create'


class PollInvalidationError(InvalidationError):
    """Raised when a status query fails."""
    stage = 'invalidation-poll'


class PollTimeoutError(PollInvalidationError):
    """Raised when the invalidation does not complete before the deadline."""
    stage = 'invalidation-timeout'


class PollCancelledError(PollInvalidationError):
    """Raised when the operator is stopping while an invalidation is polled."""
    stage = 'invalidation-cancelled'


class StatusUpdateError(InvalidationError):
    """Raised when the resource status cannot be persisted."""
    stage = 'status-update'


class HandlerError(Exception):
    """Raised by Handler.handle when the workflow fails."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"failed to process invalidation request: {cause}")
