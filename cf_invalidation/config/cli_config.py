"""Operator configuration management"""

import yaml
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from cf_invalidation.config.settings import (
    API_GROUP,
    API_VERSION,
    AWS_DEFAULT_REGION,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_POLL_TIMEOUT,
    DEFAULT_RETRY_BACKOFF,
    KIND,
    PLURAL,
)


@dataclass
class OperatorSettings:
    """Effective operator settings"""
    group: str = API_GROUP
    version: str = API_VERSION
    kind: str = KIND
    plural: str = PLURAL
    namespaces: List[str] = field(default_factory=list)  # empty means cluster-wide
    context: Optional[str] = None
    aws_region: str = AWS_DEFAULT_REGION
    cdn_provider: str = 'cloudfront'
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: Optional[float] = DEFAULT_POLL_TIMEOUT
    retry_backoff: float = DEFAULT_RETRY_BACKOFF
    record_failures: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load operator settings from a YAML mapping.

    An empty file gives an empty configuration. The path is kept under
    '_config_path' for the `config` command.

    Raises:
        ValueError: If the document is not a mapping
    """
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}
    elif not isinstance(config, dict):
        raise ValueError(f"{config_path}: expected a mapping of settings, got {type(config).__name__}")

    config['_config_path'] = config_path
    return config


def config_search_paths() -> List[Path]:
    """Locations checked when no --config is given, most specific first"""
    return [
        Path.cwd() / 'cf-invalidation.yaml',
        Path.home() / '.cf-invalidation' / 'config.yaml',
        # ConfigMap mounted into the operator pod
        Path('/etc/cf-invalidation/config.yaml'),
    ]


def get_default_config_path() -> Optional[str]:
    return next((str(p) for p in config_search_paths() if p.is_file()), None)


def build_settings(config: Optional[Dict[str, Any]] = None, **overrides) -> OperatorSettings:
    """
    Merge defaults, file configuration and explicit overrides.

    Overrides set to None are ignored so unset CLI options keep the file value.
    """
    known = {f.name for f in fields(OperatorSettings)}
    values = {k: v for k, v in (config or {}).items() if k in known}
    values.update({k: v for k, v in overrides.items() if k in known and v is not None})

    if isinstance(values.get('namespaces'), str):
        values['namespaces'] = [values['namespaces']]

    return OperatorSettings(**values)


def validate_config(config: Dict[str, Any]) -> list:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages
    """
    issues = []
    known = {f.name for f in fields(OperatorSettings)}

    for key in config:
        if not key.startswith('_') and key not in known:
            issues.append(f"Warning: Unknown setting '{key}'")

    interval = config.get('poll_interval')
    if interval is not None and (not isinstance(interval, (int, float)) or interval < 0):
        issues.append("Error: 'poll_interval' must be a non-negative number")

    timeout = config.get('poll_timeout')
    if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
        issues.append("Error: 'poll_timeout' must be a positive number")

    namespaces = config.get('namespaces')
    if namespaces is not None and not isinstance(namespaces, (list, str)):
        issues.append("Error: 'namespaces' must be a list")

    return issues
