"""
Export renderer configuration.

Two ways of producing a PDF are supported; whichever is configured wins, with
Reactive Resume taking precedence over the bundled HTML printer.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_REQUEST_TIMEOUT = 60.0


def _optional(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


@dataclass(frozen=True)
class ExportConfig:
    # Reactive Resume instance (import + printer API)
    rxresume_base_url: Optional[str] = None
    rxresume_api_key: Optional[str] = None

    # Headless-browser printer that turns HTML into PDF
    pdf_printer_url: Optional[str] = None
    pdf_printer_token: Optional[str] = None

    # Seconds per outbound HTTP call to a renderer
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(cls) -> "ExportConfig":
        return cls(
            rxresume_base_url=_optional("RXRESUME_BASE_URL"),
            rxresume_api_key=_optional("RXRESUME_API_KEY"),
            pdf_printer_url=_optional("PDF_PRINTER_URL"),
            pdf_printer_token=_optional("PDF_PRINTER_TOKEN"),
            request_timeout=float(
                _optional("EXPORT_HTTP_TIMEOUT") or DEFAULT_REQUEST_TIMEOUT
            ),
        )

    @property
    def reactive_resume_enabled(self) -> bool:
        return bool(self.rxresume_base_url and self.rxresume_api_key)

    @property
    def printer_enabled(self) -> bool:
        return bool(self.pdf_printer_url)
