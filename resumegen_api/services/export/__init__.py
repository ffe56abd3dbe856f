"""
Document export package.

- export_service: render -> upload -> sign pipeline for generated documents
- reactive_resume / pdf_printer: the two PDF renderers
- html_renderer: standalone HTML resume for the printer
"""

from .config import ExportConfig
from .errors import (
    DocumentNotFoundError,
    ExportConfigurationError,
    ExportError,
    RendererError,
    ResumeNotFoundError,
    UnsupportedDocumentTypeError,
)
from .export_service import ExportService, export_key

__all__ = [
    "ExportConfig",
    "ExportService",
    "export_key",
    # Errors
    "ExportError",
    "DocumentNotFoundError",
    "ResumeNotFoundError",
    "UnsupportedDocumentTypeError",
    "ExportConfigurationError",
    "RendererError",
]
