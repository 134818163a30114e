"""CustomResourceDefinition for Invalidation resources"""

from typing import Any, Dict

from cf_invalidation.config.cli_config import OperatorSettings
from cf_invalidation.config.settings import PHASE_COMPLETED, PHASE_FAILED


def build_crd(settings: OperatorSettings) -> Dict[str, Any]:
    """
    Build the apiextensions.k8s.io/v1 manifest.

    spec is immutable from the requester's point of view; status is a
    subresource so the operator can patch it separately.
    """
    singular = settings.kind.lower()
    schema = {
        'type': 'object',
        'properties': {
            'spec': {
                'type': 'object',
                'required': ['configMap', 'path'],
                'properties': {
                    'configMap': {
                        'type': 'string',
                        'description': 'ConfigMap holding the distribution id and credentials',
                    },
                    'path': {
                        'type': 'string',
                        'description': 'Path to invalidate',
                    },
                },
            },
            'status': {
                'type': 'object',
                'x-kubernetes-preserve-unknown-fields': True,
                'properties': {
                    'id': {'type': 'string'},
                    'phase': {'type': 'string', 'enum': [PHASE_COMPLETED, PHASE_FAILED]},
                    'message': {'type': 'string'},
                },
            },
        },
    }

    return {
        'apiVersion': 'apiextensions.k8s.io/v1',
        'kind': 'CustomResourceDefinition',
        'metadata': {'name': f"{settings.plural}.{settings.group}"},
        'spec': {
            'group': settings.group,
            'scope': 'Namespaced',
            'names': {
                'kind': settings.kind,
                'listKind': f"{settings.kind}List",
                'plural': settings.plural,
                'singular': singular,
            },
            'versions': [{
                'name': settings.version,
                'served': True,
                'storage': True,
                'subresources': {'status': {}},
                'schema': {'openAPIV3Schema': schema},
                'additionalPrinterColumns': [
                    {'name': 'Path', 'type': 'string', 'jsonPath': '.spec.path'},
                    {'name': 'Phase', 'type': 'string', 'jsonPath': '.status.phase'},
                    {'name': 'ID', 'type': 'string', 'jsonPath': '.status.id'},
                    {'name': 'Age', 'type': 'date', 'jsonPath': '.metadata.creationTimestamp'},
                ],
            }],
        },
    }
