"""
Shared fixtures: in-memory stand-ins for the Kubernetes API and the CDN.
"""

import copy

import pytest

from cf_invalidation.errors import (
    ClusterUnavailableError,
    ConfigNotFoundError,
    CreateInvalidationError,
    PollInvalidationError,
    StatusUpdateError,
)
from cf_invalidation.handler import Handler
from cf_invalidation.models import Invalidation, InvalidationSpec, ObjectMeta
from cf_invalidation.providers.base import CDNProvider


CONFIG_DATA = {
    'cloudfront.distribution.id': 'E123',
    'cloudfront.credential.id': 'AKIAEXAMPLE',
    'cloudfront.credential.access': 'secret',
}


class FakeKube:
    """Records ConfigMap reads and status writes"""

    def __init__(self, config_maps=None, invalidations=None, unavailable=False,
                 fail_update=False):
        self.config_maps = config_maps or {}
        self.invalidations = invalidations or []
        self.unavailable = unavailable
        self.fail_update = fail_update
        self.reads = []
        self.update_attempts = 0
        self.status_updates = []

    def read_config_map(self, namespace, name):
        if self.unavailable:
            raise ClusterUnavailableError("failed to get Kubernetes config")
        self.reads.append((namespace, name))
        if (namespace, name) not in self.config_maps:
            raise ConfigNotFoundError(f"failed to load ConfigMap {namespace}/{name}: 404 Not Found")
        return dict(self.config_maps[(namespace, name)])

    def update_status(self, invalidation):
        self.update_attempts += 1
        if self.fail_update:
            raise StatusUpdateError("failed to update status: 500 Internal Server Error",
                                    invalidation_id=invalidation.status.id)
        self.status_updates.append(copy.deepcopy(invalidation.status))
        return invalidation.to_dict()

    def get_invalidation(self, namespace, name):
        for item in self.invalidations:
            if item.namespace == namespace and item.name == name:
                return item
        raise LookupError(f"{namespace}/{name} not found")

    def list_invalidations(self, namespace=None):
        return [i for i in self.invalidations if namespace in (None, i.namespace)]


class StubProvider(CDNProvider):
    """
    CDN stub: reports each entry of `statuses` in turn, then `final`.
    """

    def __init__(self, invalidation_id='I456', statuses=None, final='Completed',
                 create_error=False, poll_error=False):
        self.invalidation_id = invalidation_id
        self.statuses = list(statuses or [])
        self.final = final
        self.create_error = create_error
        self.poll_error = poll_error
        self.creates = []
        self.polls = 0

    def create_invalidation(self, distribution_id, path, caller_reference):
        self.creates.append((distribution_id, path, caller_reference))
        if self.create_error:
            raise CreateInvalidationError("failed to create invalidation: AccessDenied")
        return self.invalidation_id

    def get_invalidation_status(self, distribution_id, invalidation_id):
        self.polls += 1
        if self.poll_error:
            raise PollInvalidationError("failed to get invalidation: Throttling",
                                        invalidation_id=invalidation_id)
        if self.statuses:
            return self.statuses.pop(0)
        return self.final


class ProviderFactoryStub:
    """Stands in for ProviderFactory.get_cdn_provider"""

    def __init__(self, provider):
        self.provider = provider
        self.calls = []

    def __call__(self, provider_type, credentials, region=None):
        self.calls.append((provider_type, credentials, region))
        return self.provider


def make_request(namespace='web', name='purge-images', config_map='cf-creds', path='/images/*',
                 uid='0b6f4a3e-uid', generation=1):
    return Invalidation(
        metadata=ObjectMeta(name=name, namespace=namespace, uid=uid, generation=generation),
        spec=InvalidationSpec(config_map=config_map, path=path),
    )


@pytest.fixture
def kube():
    return FakeKube(config_maps={('web', 'cf-creds'): CONFIG_DATA})


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def factory(provider):
    return ProviderFactoryStub(provider)


@pytest.fixture
def handler(kube, factory):
    return Handler(kube, poll_interval=0, provider_factory=factory)


@pytest.fixture
def request_obj():
    return make_request()
