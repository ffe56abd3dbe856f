"""Client for the headless-browser HTML-to-PDF printer."""

import logging

import requests

from .config import ExportConfig
from .errors import ExportConfigurationError, RendererError

logger = logging.getLogger(__name__)

ERROR_BODY_LIMIT = 200


class PdfPrinterClient:
    def __init__(self, config: ExportConfig):
        if not config.printer_enabled:
            raise ExportConfigurationError("PDF_PRINTER_URL is not configured")
        self.base_url = config.pdf_printer_url.rstrip("/")
        self.token = config.pdf_printer_token
        self.timeout = config.request_timeout

    def render(self, html: str) -> bytes:
        """POST the page to the printer and return the PDF bytes."""
        params = {"token": self.token} if self.token else None
        response = requests.post(
            f"{self.base_url}/pdf",
            params=params,
            json={"html": html, "options": {"format": "A4", "printBackground": True}},
            timeout=self.timeout,
        )
        if not response.ok:
            raise RendererError(
                f"PDF printer failed: {response.status_code} "
                f"{response.text[:ERROR_BODY_LIMIT]}"
            )
        logger.info(f"PDF printer returned {len(response.content)} bytes")
        return response.content
