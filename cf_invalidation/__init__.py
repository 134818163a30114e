"""
CloudFront invalidation operator.

Watches Invalidation custom resources, submits the requested path to
CloudFront and records the outcome on the resource status.
"""

__version__ = "0.1.0"
