"""
Base interface for CDN providers.
Provider implementations inherit from CDNProvider and register with ProviderFactory.
"""

from abc import ABC, abstractmethod
from typing import Dict

from cf_invalidation.models import CloudFrontCredentials


class CDNProvider(ABC):
    """Abstract base class for CDN cache invalidation"""

    @abstractmethod
    def create_invalidation(self, distribution_id: str, path: str, caller_reference: str) -> str:
        """Submit an invalidation for a single path, returns the invalidation id"""
        pass

    @abstractmethod
    def get_invalidation_status(self, distribution_id: str, invalidation_id: str) -> str:
        """Get the provider status string of an invalidation"""
        pass


class ProviderFactory:
    """Factory for creating CDN provider instances"""

    _cdn_providers: Dict[str, type] = {}

    @classmethod
    def register_cdn_provider(cls, provider_type: str, provider_class: type):
        """Register a CDN provider implementation"""
        cls._cdn_providers[provider_type] = provider_class

    @classmethod
    def get_cdn_provider(cls, provider_type: str, credentials: CloudFrontCredentials,
                         region: str = None) -> CDNProvider:
        """Get CDN provider instance authenticated with the given credentials"""
        if provider_type not in cls._cdn_providers:
            raise ValueError(f"Unknown CDN provider type: {provider_type}")
        return cls._cdn_providers[provider_type](credentials, region=region)
