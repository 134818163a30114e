"""
CDN provider registry.

Importing this package registers the built-in providers.
"""

from cf_invalidation.providers.base import CDNProvider, ProviderFactory
from cf_invalidation.providers import cloudfront  # noqa: F401

__all__ = ['CDNProvider', 'ProviderFactory']
