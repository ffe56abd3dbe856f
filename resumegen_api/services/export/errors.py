class ExportError(Exception):
    """Base class for export failures."""


class DocumentNotFoundError(ExportError):
    """The document does not exist or belongs to another user."""

    def __init__(self, message: str = "Document not found"):
        super().__init__(message)


class ResumeNotFoundError(ExportError):
    def __init__(self, message: str = "Resume not found"):
        super().__init__(message)


class UnsupportedDocumentTypeError(ExportError):
    """Only tailored resumes can be exported to PDF."""

    def __init__(
        self,
        message: str = "PDF export is only supported for resume documents",
    ):
        super().__init__(message)


class ExportConfigurationError(ExportError):
    """No renderer is configured."""


class RendererError(ExportError):
    """A renderer answered with a non-success status or an unusable body."""
