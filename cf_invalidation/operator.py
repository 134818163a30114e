"""Kopf wiring: delivers Invalidation events to the handler"""

import logging
import threading
from typing import Any

import kopf

from cf_invalidation.config.cli_config import OperatorSettings
from cf_invalidation.handler import Handler
from cf_invalidation.models import Event, Invalidation
from cf_invalidation.utils.kubernetes import KubernetesClient

logger = logging.getLogger(__name__)


def build_handler(settings: OperatorSettings, kube=None, stop_event: threading.Event = None) -> Handler:
    """Create a Handler from settings, with a control-plane client unless one is given"""
    if kube is None:
        kube = KubernetesClient(
            context=settings.context,
            group=settings.group,
            version=settings.version,
            plural=settings.plural,
        )
    return Handler(
        kube,
        provider_type=settings.cdn_provider,
        region=settings.aws_region,
        poll_interval=settings.poll_interval,
        poll_timeout=settings.poll_timeout,
        stop_event=stop_event,
        record_failures=settings.record_failures,
    )


def handle_body(handler: Handler, body: Any):
    """Deliver a kopf resource body to the handler"""
    return handler.handle(Event(object=Invalidation.from_dict(body)))


def register_handlers(registry: kopf.OperatorRegistry, handler: Handler,
                      settings: OperatorSettings) -> kopf.OperatorRegistry:
    """
    Register event handlers for the Invalidation resource.

    spec is write-once, so only creation and operator restarts (resume)
    deliver a request; there is no update handler.
    Errors raised by the handler are left to kopf, which redelivers the
    event after settings.retry_backoff seconds.
    """
    resource = (settings.group, settings.version, settings.plural)

    def on_invalidation(body: Any, **_):
        handle_body(handler, body)

    def on_cleanup(**_):
        logger.info("Operator stopping, abandoning in-flight invalidations")
        handler.stop_event.set()

    kopf.on.create(*resource, id='invalidate', registry=registry,
                   backoff=settings.retry_backoff)(on_invalidation)
    kopf.on.resume(*resource, id='invalidate-resume', registry=registry,
                   backoff=settings.retry_backoff)(on_invalidation)
    kopf.on.cleanup(registry=registry)(on_cleanup)
    return registry


def run_operator(settings: OperatorSettings, kube=None):
    """Start the operator and block until it stops"""
    handler = build_handler(settings, kube=kube)
    registry = register_handlers(kopf.OperatorRegistry(), handler, settings)

    if settings.namespaces:
        logger.info("Watching namespaces: %s", ', '.join(settings.namespaces))
    else:
        logger.info("Watching all namespaces")

    kopf.run(
        registry=registry,
        standalone=True,
        clusterwide=not settings.namespaces,
        namespaces=settings.namespaces,
    )
