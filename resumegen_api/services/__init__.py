"""
Services package for the ResumeGen API.

- storage: export bucket bootstrap, uploads and presigned download URLs
- export: document rendering (Reactive Resume / HTML printer) and delivery
"""

from .storage import ObjectStorageClient, StorageConfig, UploadResult
from .export import ExportConfig, ExportService

__all__ = [
    # Storage
    "ObjectStorageClient",
    "StorageConfig",
    "UploadResult",
    # Export
    "ExportConfig",
    "ExportService",
]
