"""Tests for the cf-invalidation CLI"""

import json

import pytest
import yaml
from click.testing import CliRunner

from cf_invalidation import cli as cli_module
from cf_invalidation import operator
from cf_invalidation.handler import Handler
from cf_invalidation.models import InvalidationStatus

from conftest import CONFIG_DATA, FakeKube, ProviderFactoryStub, StubProvider, make_request


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_kube(monkeypatch):
    kube = FakeKube(
        config_maps={('web', 'cf-creds'): CONFIG_DATA},
        invalidations=[make_request()],
    )
    monkeypatch.setattr(cli_module.OperatorContext, 'get_kube_client', lambda self, settings: kube)
    monkeypatch.setattr(cli_module, 'get_default_config_path', lambda: None)
    return kube


def _patch_provider(monkeypatch, provider):
    def build_handler(settings, kube=None, stop_event=None):
        return Handler(kube, poll_interval=0, provider_factory=ProviderFactoryStub(provider))
    monkeypatch.setattr(operator, 'build_handler', build_handler)


def test_crd_prints_yaml(runner, fake_kube):
    result = runner.invoke(cli_module.cli, ['crd'])

    assert result.exit_code == 0
    manifest = yaml.safe_load(result.output)
    assert manifest['kind'] == 'CustomResourceDefinition'
    assert manifest['metadata']['name'] == 'invalidations.cloudfront.previousnext.com.au'


def test_config_json(runner, fake_kube, tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("poll_timeout: 900\n")

    result = runner.invoke(cli_module.cli, ['--log-level', 'error', '--config', str(path), '-o', 'json', 'config'])

    assert result.exit_code == 0
    info = json.loads(result.output)
    assert info['poll_timeout'] == 900
    assert info['config_file'] == str(path)


def test_invalidate_completes(runner, fake_kube, monkeypatch):
    _patch_provider(monkeypatch, StubProvider(statuses=['InProgress']))

    result = runner.invoke(cli_module.cli, ['--log-level', 'error', '-o', 'json', 'invalidate', 'web', 'purge-images'])

    assert result.exit_code == 0
    row = json.loads(result.output)
    assert row['phase'] == 'Completed'
    assert row['id'] == 'I456'
    assert fake_kube.status_updates == [InvalidationStatus(id='I456', phase='Completed')]


def test_invalidate_failure_exits_non_zero(runner, fake_kube, monkeypatch):
    _patch_provider(monkeypatch, StubProvider(create_error=True))

    result = runner.invoke(cli_module.cli, ['invalidate', 'web', 'purge-images'])

    assert result.exit_code == 1
    assert "failed to process invalidation request" in result.output
    assert fake_kube.status_updates[0].phase == 'Failed'


def test_invalidate_skips_completed(runner, fake_kube, monkeypatch):
    fake_kube.invalidations[0].status = InvalidationStatus(id='I001', phase='Completed')
    provider = StubProvider()
    _patch_provider(monkeypatch, provider)

    result = runner.invoke(cli_module.cli, ['invalidate', 'web', 'purge-images'])

    assert result.exit_code == 0
    assert provider.creates == []


def test_list(runner, fake_kube):
    result = runner.invoke(cli_module.cli, ['list', '-n', 'web'])

    assert result.exit_code == 0
    assert 'purge-images' in result.output
    assert '/images/*' in result.output
    assert result.output.splitlines()[0].split() == ['NAMESPACE', 'NAME', 'PATH', 'PHASE', 'ID']


def test_run_passes_namespaces(runner, fake_kube, monkeypatch):
    captured = []
    monkeypatch.setattr(operator, 'run_operator', lambda settings: captured.append(settings))

    result = runner.invoke(cli_module.cli, ['run', '-n', 'web', '-n', 'assets', '--poll-timeout', '60'])

    assert result.exit_code == 0
    assert captured[0].namespaces == ['web', 'assets']
    assert captured[0].poll_timeout == 60


def test_run_all_namespaces(runner, fake_kube, monkeypatch):
    captured = []
    monkeypatch.setattr(operator, 'run_operator', lambda settings: captured.append(settings))

    result = runner.invoke(cli_module.cli, ['run', '--all-namespaces'])

    assert result.exit_code == 0
    assert captured[0].namespaces == []


def test_list_json_includes_message(runner, fake_kube):
    fake_kube.invalidations[0].status = InvalidationStatus(phase='Failed', message='AccessDenied')

    result = runner.invoke(cli_module.cli, ['--log-level', 'error', '-o', 'json', 'list'])

    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert rows == [{
        'namespace': 'web',
        'name': 'purge-images',
        'path': '/images/*',
        'phase': 'Failed',
        'id': None,
        'message': 'AccessDenied',
    }]


def test_list_empty(runner, fake_kube):
    result = runner.invoke(cli_module.cli, ['list', '-n', 'other'])

    assert result.exit_code == 0
    assert 'No invalidations found' in result.output


def test_invalid_config_file(runner, fake_kube, tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("just a string\n")

    result = runner.invoke(cli_module.cli, ['--config', str(path), 'config'])

    assert result.exit_code == 1
    assert 'Invalid config file' in result.output
