"""
Object storage package.

- config: StorageConfig, read from the environment once at startup
- object_storage_client: bucket bootstrap, uploads and presigned URLs
"""

from .config import StorageConfig
from .object_storage_client import (
    BucketProbe,
    BucketState,
    ObjectStorageClient,
    UploadResult,
    classify_bucket_error,
)

__all__ = [
    "StorageConfig",
    "ObjectStorageClient",
    "UploadResult",
    "BucketProbe",
    "BucketState",
    "classify_bucket_error",
]
