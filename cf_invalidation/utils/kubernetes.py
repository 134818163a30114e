"""Kubernetes API access for the operator (in-cluster or kubeconfig)"""

import logging
from typing import Any, Dict, List, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from cf_invalidation.config.settings import API_GROUP, API_VERSION, PLURAL
from cf_invalidation.errors import ClusterUnavailableError, ConfigNotFoundError, StatusUpdateError
from cf_invalidation.models import Invalidation

logger = logging.getLogger(__name__)


class KubernetesClient:
    """
    Control-plane client used by the invalidation handler.

    Configuration is loaded on first use. With in_cluster=None the service
    account is tried first, then the local kubeconfig.
    """

    def __init__(self, context: Optional[str] = None, in_cluster: Optional[bool] = None,
                 group: str = API_GROUP, version: str = API_VERSION, plural: str = PLURAL):
        self.context = context
        self.in_cluster = in_cluster
        self.group = group
        self.version = version
        self.plural = plural
        self._core_v1 = None
        self._custom = None

    def _load_config(self):
        """Load Kubernetes configuration"""
        try:
            if self.in_cluster is None:
                try:
                    config.load_incluster_config()
                except ConfigException:
                    config.load_kube_config(context=self.context)
            elif self.in_cluster:
                config.load_incluster_config()
            else:
                config.load_kube_config(context=self.context)
        except (ConfigException, OSError) as e:
            raise ClusterUnavailableError(f"failed to get Kubernetes config: {e}") from e

        self._core_v1 = client.CoreV1Api()
        self._custom = client.CustomObjectsApi()

    @property
    def core_v1(self):
        if self._core_v1 is None:
            self._load_config()
        return self._core_v1

    @property
    def custom(self):
        if self._custom is None:
            self._load_config()
        return self._custom

    def read_config_map(self, namespace: str, name: str) -> Dict[str, str]:
        """Get the data section of a ConfigMap"""
        try:
            config_map = self.core_v1.read_namespaced_config_map(name=name, namespace=namespace)
        except ApiException as e:
            raise ConfigNotFoundError(
                f"failed to load ConfigMap {namespace}/{name}: {e.status} {e.reason}"
            ) from e
        return config_map.data or {}

    def get_invalidation(self, namespace: str, name: str) -> Invalidation:
        """Get a single Invalidation resource"""
        body = self.custom.get_namespaced_custom_object(
            group=self.group,
            version=self.version,
            namespace=namespace,
            plural=self.plural,
            name=name,
        )
        return Invalidation.from_dict(body)

    def list_invalidations(self, namespace: Optional[str] = None) -> List[Invalidation]:
        """List Invalidation resources in a namespace, or cluster-wide"""
        if namespace:
            response = self.custom.list_namespaced_custom_object(
                group=self.group, version=self.version, namespace=namespace, plural=self.plural
            )
        else:
            response = self.custom.list_cluster_custom_object(
                group=self.group, version=self.version, plural=self.plural
            )
        return [Invalidation.from_dict(item) for item in response.get('items', [])]

    def update_status(self, invalidation: Invalidation) -> Dict[str, Any]:
        """
        Persist invalidation.status through the status subresource.

        Every field is sent, so clearing a field (e.g. the message of an
        earlier failure) removes it from the stored object.
        """
        status = invalidation.status
        body = {'status': {'id': status.id, 'phase': status.phase, 'message': status.message}}
        try:
            return self.custom.patch_namespaced_custom_object_status(
                group=self.group,
                version=self.version,
                namespace=invalidation.namespace,
                plural=self.plural,
                name=invalidation.name,
                body=body,
            )
        except ApiException as e:
            raise StatusUpdateError(
                f"failed to update status of {invalidation.namespace}/{invalidation.name}: "
                f"{e.status} {e.reason}",
                invalidation_id=status.id,
            ) from e
