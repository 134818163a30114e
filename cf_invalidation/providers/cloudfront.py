"""
AWS CloudFront CDN provider implementation.
"""

from botocore.exceptions import BotoCoreError, ClientError

from cf_invalidation.errors import CreateInvalidationError, PollInvalidationError
from cf_invalidation.models import CloudFrontCredentials
from cf_invalidation.providers.base import CDNProvider, ProviderFactory
from cf_invalidation.utils.aws import get_static_client


class CloudFrontProvider(CDNProvider):
    """
    CloudFront implementation of the CDN provider.

    Status values reported by CloudFront are 'InProgress' and 'Completed'.
    See https://docs.aws.amazon.com/cli/latest/reference/cloudfront/create-invalidation.html
    """

    def __init__(self, credentials: CloudFrontCredentials, region: str = None, client=None):
        self.credentials = credentials
        self.client = client or get_static_client('cloudfront', credentials, region)

    def create_invalidation(self, distribution_id: str, path: str, caller_reference: str) -> str:
        """Create CloudFront cache invalidation for one path"""
        try:
            response = self.client.create_invalidation(
                DistributionId=distribution_id,
                InvalidationBatch={
                    'Paths': {
                        'Quantity': 1,
                        'Items': [path]
                    },
                    'CallerReference': caller_reference
                }
            )
        except (ClientError, BotoCoreError) as e:
            raise CreateInvalidationError(f"failed to create invalidation: {e}") from e

        return response['Invalidation']['Id']

    def get_invalidation_status(self, distribution_id: str, invalidation_id: str) -> str:
        """Get CloudFront invalidation status"""
        try:
            response = self.client.get_invalidation(
                DistributionId=distribution_id,
                Id=invalidation_id
            )
        except (ClientError, BotoCoreError) as e:
            raise PollInvalidationError(
                f"failed to get invalidation: {e}", invalidation_id=invalidation_id
            ) from e

        return response['Invalidation']['Status']


# Register the provider
ProviderFactory.register_cdn_provider('cloudfront', CloudFrontProvider)
