"""
Export service: turns a tailored resume into a downloadable PDF.

Renders the document (Reactive Resume or the HTML printer), stores the bytes
in the export bucket and records the export on the document. Every call
re-renders and re-signs; previously issued links are never handed out again.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_

from resumegen_api.extensions import db
from resumegen_api.models import DocumentExport, GeneratedDocument, Resume, Template
from resumegen_api.services.storage import ObjectStorageClient, UploadResult

from .config import ExportConfig
from .errors import (
    DocumentNotFoundError,
    ExportConfigurationError,
    ResumeNotFoundError,
    UnsupportedDocumentTypeError,
)
from .html_renderer import build_resume_html
from .pdf_printer import PdfPrinterClient
from .reactive_resume import ReactiveResumeClient, build_reactive_resume_json

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"

NO_RENDERER_MESSAGE = (
    "PDF export requires either PDF_PRINTER_URL (built-in printer) or "
    "RXRESUME_BASE_URL + RXRESUME_API_KEY."
)


def export_key(user_id: str, document_id, extension: str = "pdf") -> str:
    """Storage key for a document export; one object per user/document pair."""
    return f"exports/{user_id}/{document_id}.{extension}"


@dataclass(frozen=True)
class RenderedPdf:
    body: bytes
    external_id: Optional[str] = None


class ExportService:
    """Service class for rendering and delivering document exports."""

    def __init__(self, storage: ObjectStorageClient, config: Optional[ExportConfig] = None):
        self.storage = storage
        self.config = config or ExportConfig.from_env()

    # ---- lookups ---------------------------------------------------------

    def get_document(self, document_id: int, user_id: str) -> GeneratedDocument:
        document = GeneratedDocument.query.filter_by(
            id=document_id, user_id=user_id
        ).first()
        if document is None:
            raise DocumentNotFoundError()
        return document

    def resolve_template(self, user_id: str, template_id: Optional[int] = None):
        """Pick the requested template if the user may see it, else the default."""
        template = None
        if template_id is not None:
            template = Template.query.filter(
                Template.id == template_id,
                or_(
                    Template.user_id.is_(None),
                    Template.user_id == user_id,
                    Template.is_public.is_(True),
                ),
            ).first()
        if template is None:
            template = (
                Template.query.filter(Template.user_id.is_(None))
                .order_by(Template.is_default.desc())
                .first()
            )
        return template

    # ---- rendering -------------------------------------------------------

    def render_pdf(
        self, document: GeneratedDocument, resume: Resume, user_id: str, template_id=None
    ) -> RenderedPdf:
        if self.config.reactive_resume_enabled:
            template = self.resolve_template(user_id, template_id)
            payload = build_reactive_resume_json(document, resume, template)
            body, rr_resume_id = ReactiveResumeClient(self.config).render_pdf(payload)
            return RenderedPdf(body=body, external_id=rr_resume_id)

        if self.config.printer_enabled:
            html = build_resume_html(document, resume)
            return RenderedPdf(body=PdfPrinterClient(self.config).render(html))

        raise ExportConfigurationError(NO_RENDERER_MESSAGE)

    # ---- export ----------------------------------------------------------

    def export_document_to_pdf(
        self, document_id: int, user_id: str, template_id: Optional[int] = None
    ) -> UploadResult:
        """
        Render a resume document to PDF, upload it and sign a download link.

        Args:
            document_id: GeneratedDocument id
            user_id: Owner of the document
            template_id: Optional Reactive Resume template

        Returns:
            UploadResult: presigned url, storage key and url expiry

        Raises:
            DocumentNotFoundError, UnsupportedDocumentTypeError,
            ResumeNotFoundError, ExportConfigurationError, RendererError,
            and storage errors unmodified.
        """
        document = self.get_document(document_id, user_id)
        if document.type != "resume":
            raise UnsupportedDocumentTypeError()

        resume = Resume.query.filter_by(id=document.resume_id, user_id=user_id).first()
        if resume is None:
            raise ResumeNotFoundError()

        rendered = self.render_pdf(document, resume, user_id, template_id)
        result = self.storage.upload(
            export_key(user_id, document.id), rendered.body, PDF_CONTENT_TYPE
        )

        try:
            db.session.add(
                DocumentExport(
                    document_id=document.id,
                    format="pdf",
                    url=result.url,
                    storage_key=result.key,
                    external_id=rendered.external_id,
                    expires_at=result.expires_at,
                )
            )
            document.updated_at = datetime.now(timezone.utc)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Exported document {document.id} for user {user_id} to {result.key}")
        return result
