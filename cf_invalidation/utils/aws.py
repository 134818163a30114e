"""
AWS client helpers.
"""

import boto3

from cf_invalidation.config.settings import AWS_DEFAULT_REGION
from cf_invalidation.models import CloudFrontCredentials


def get_static_client(service: str, credentials: CloudFrontCredentials, region: str = None):
    """
    Get boto3 client authenticated with a static key pair.
    No role assumption and no token refresh: the key pair comes straight
    from the request's ConfigMap.

    Args:
        service: AWS service name (e.g., 'cloudfront')
        credentials: Key pair read from the ConfigMap
        region: AWS region (defaults to us-east-1, CloudFront is global)

    Returns:
        boto3 client for the specified service
    """
    return boto3.client(
        service,
        region_name=region or AWS_DEFAULT_REGION,
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
    )
