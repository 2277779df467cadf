"""Provider implementations for external services.

Each provider module exports a `Provider` class alias for the main provider class,
along with its credentials and params types.

Available providers (require optional dependencies):
- opensearch: OpenSearch reserved instances via boto3
"""

from reserved_dal.providers import opensearch

__all__ = [
    "opensearch",
]
