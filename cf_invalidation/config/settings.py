"""Global operator configuration."""

# ConfigMap keys
CONFIG_DISTRIBUTION_ID = 'cloudfront.distribution.id'
CONFIG_CREDENTIAL_ID = 'cloudfront.credential.id'
CONFIG_CREDENTIAL_ACCESS = 'cloudfront.credential.access'

# Older deployments store the IAM key pair under these names
LEGACY_CONFIG_KEYS = {
    CONFIG_CREDENTIAL_ID: 'cloudfront.iam.id',
    CONFIG_CREDENTIAL_ACCESS: 'cloudfront.iam.secret',
}

# Custom resource
API_GROUP = 'cloudfront.previousnext.com.au'
API_VERSION = 'v1alpha1'
KIND = 'Invalidation'
PLURAL = 'invalidations'
SINGULAR = 'invalidation'

# Status phases
PHASE_COMPLETED = 'Completed'
PHASE_FAILED = 'Failed'

# CloudFront reports this once edge caches are purged
CLOUDFRONT_STATUS_COMPLETED = 'Completed'

# Polling (10 queries per second)
DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_POLL_TIMEOUT = None

# CloudFront is a global service
AWS_DEFAULT_REGION = 'us-east-1'

# kopf retry delay between redeliveries of a failed event
DEFAULT_RETRY_BACKOFF = 30
