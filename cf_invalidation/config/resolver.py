"""ConfigMap lookups for distribution and credentials"""

from typing import Dict, Optional

from cf_invalidation.config.settings import (
    CONFIG_CREDENTIAL_ACCESS,
    CONFIG_CREDENTIAL_ID,
    CONFIG_DISTRIBUTION_ID,
    LEGACY_CONFIG_KEYS,
)
from cf_invalidation.errors import ConfigKeyMissingError
from cf_invalidation.models import CloudFrontCredentials


def get_config(key: str, data: Optional[Dict[str, str]]) -> str:
    """
    Look up a ConfigMap value by key.

    Args:
        key: Key to look up
        data: ConfigMap data section (may be None for an empty ConfigMap)

    Returns:
        The value, unmodified

    Raises:
        ConfigKeyMissingError: If the key is absent
    """
    if not data or key not in data:
        raise ConfigKeyMissingError(key)
    return data[key]


def _get_with_legacy(key: str, data: Optional[Dict[str, str]]) -> str:
    try:
        return get_config(key, data)
    except ConfigKeyMissingError:
        legacy_key = LEGACY_CONFIG_KEYS.get(key)
        if legacy_key and data and legacy_key in data:
            return data[legacy_key]
        raise


def resolve_credentials(data: Optional[Dict[str, str]]) -> CloudFrontCredentials:
    """
    Extract distribution id and credential pair from ConfigMap data.

    Keys are checked in order: distribution id, credential id, credential
    access. The first missing one is reported.
    """
    distribution_id = get_config(CONFIG_DISTRIBUTION_ID, data)
    access_key_id = _get_with_legacy(CONFIG_CREDENTIAL_ID, data)
    secret_access_key = _get_with_legacy(CONFIG_CREDENTIAL_ACCESS, data)

    return CloudFrontCredentials(
        distribution_id=distribution_id,
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
    )
