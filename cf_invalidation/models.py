"""
Data structures for Invalidation resources and their events.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from cf_invalidation.config.settings import API_GROUP, API_VERSION, KIND, PHASE_COMPLETED, PHASE_FAILED


@dataclass
class ObjectMeta:
    """Identity of a cluster object"""
    name: str
    namespace: str
    uid: Optional[str] = None
    generation: Optional[int] = None
    resource_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ObjectMeta':
        return cls(
            name=data.get('name', ''),
            namespace=data.get('namespace', ''),
            uid=data.get('uid'),
            generation=data.get('generation'),
            resource_version=data.get('resourceVersion'),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {'name': self.name, 'namespace': self.namespace}
        if self.uid:
            result['uid'] = self.uid
        if self.generation is not None:
            result['generation'] = self.generation
        if self.resource_version:
            result['resourceVersion'] = self.resource_version
        return result


@dataclass(frozen=True)
class InvalidationSpec:
    """What to invalidate. Written once by the requester."""
    config_map: str
    path: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InvalidationSpec':
        return cls(config_map=data.get('configMap', ''), path=data.get('path', ''))

    def to_dict(self) -> Dict[str, Any]:
        return {'configMap': self.config_map, 'path': self.path}


@dataclass
class InvalidationStatus:
    """Outcome recorded by the operator"""
    id: Optional[str] = None
    phase: Optional[str] = None  # Completed, Failed; unset while unstarted or running
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'InvalidationStatus':
        data = data or {}
        return cls(id=data.get('id'), phase=data.get('phase'), message=data.get('message'))

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.id:
            result['id'] = self.id
        if self.phase:
            result['phase'] = self.phase
        if self.message:
            result['message'] = self.message
        return result


@dataclass
class Invalidation:
    """Invalidation custom resource"""
    metadata: ObjectMeta
    spec: InvalidationSpec
    status: InvalidationStatus = field(default_factory=InvalidationStatus)

    @classmethod
    def from_dict(cls, body: Dict[str, Any]) -> 'Invalidation':
        """Build from a cluster object body (as returned by the API or kopf)"""
        return cls(
            metadata=ObjectMeta.from_dict(body.get('metadata') or {}),
            spec=InvalidationSpec.from_dict(body.get('spec') or {}),
            status=InvalidationStatus.from_dict(body.get('status')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'apiVersion': f"{API_GROUP}/{API_VERSION}",
            'kind': KIND,
            'metadata': self.metadata.to_dict(),
            'spec': self.spec.to_dict(),
            'status': self.status.to_dict(),
        }

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    def is_completed(self) -> bool:
        return self.status.phase == PHASE_COMPLETED

    def is_failed(self) -> bool:
        return self.status.phase == PHASE_FAILED


@dataclass
class Event:
    """A create/update notification delivered by the watcher"""
    object: Any
    deleted: bool = False


@dataclass
class CloudFrontCredentials:
    """Distribution and static key pair read from a ConfigMap"""
    distribution_id: str
    access_key_id: str
    secret_access_key: str

    def __repr__(self) -> str:
        return (f"CloudFrontCredentials(distribution_id={self.distribution_id!r}, "
                f"access_key_id={self.access_key_id!r}, secret_access_key='***')")
