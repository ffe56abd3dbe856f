"""
Reactive Resume integration.

Builds the Reactive Resume import schema from a tailored document and drives
the instance's OpenAPI endpoints: import the resume, ask the printer for a
PDF, then download the file it produced.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests
from markupsafe import Markup, escape

from .config import ExportConfig
from .errors import ExportConfigurationError, RendererError
from .formatting import format_location, format_period

logger = logging.getLogger(__name__)

MAX_EDUCATION_ITEMS = 5
ERROR_BODY_LIMIT = 500

NOT_CONFIGURED_MESSAGE = (
    "PDF export via Reactive Resume requires RXRESUME_BASE_URL and "
    "RXRESUME_API_KEY. Create an API key under Settings -> API Keys in the "
    "Reactive Resume instance."
)

# Sections this service never fills; they are sent hidden and empty
EMPTY_SECTIONS = (
    ("profiles", "Profiles"),
    ("projects", "Projects"),
    ("languages", "Languages"),
    ("interests", "Interests"),
    ("awards", "Awards"),
    ("certifications", "Certifications"),
    ("publications", "Publications"),
    ("volunteer", "Volunteer"),
    ("references", "References"),
)

DEFAULT_METADATA: Dict[str, Any] = {
    "template": "azurill",
    "layout": {
        "sidebarWidth": 30,
        "pages": [
            {
                "fullWidth": False,
                "main": ["summary", "experience", "education", "skills"],
                "sidebar": [],
            }
        ],
    },
    "css": {"enabled": False, "value": ""},
    "page": {
        "gapX": 16,
        "gapY": 16,
        "marginX": 16,
        "marginY": 16,
        "format": "a4",
        "locale": "en",
    },
    "design": {
        "level": {"icon": "circle", "type": "border"},
        "colors": {
            "primary": "rgba(0,0,0,1)",
            "text": "rgba(0,0,0,1)",
            "background": "rgba(255,255,255,1)",
        },
    },
    "typography": {
        "body": {"fontFamily": "Inter", "fontWeights": ["400"], "fontSize": 14, "lineHeight": 2},
        "heading": {"fontFamily": "Inter", "fontWeights": ["700"], "fontSize": 20, "lineHeight": 1.5},
    },
    "notes": "",
}


def _item() -> Dict[str, Any]:
    return {"id": str(uuid.uuid4()), "hidden": False}


def _website(url: Optional[str] = None, label: str = "") -> Dict[str, str]:
    return {"url": url or "", "label": label}


def _section(title: str, items: List[dict]) -> Dict[str, Any]:
    return {"title": title, "columns": 1, "hidden": not items, "items": items}


def _multiline(text: Optional[str]) -> str:
    return str(Markup("<br/>").join(escape(text or "").split("\n")))


def _experience(content: Dict[str, Any], resume_experience: List[dict]) -> List[dict]:
    items = []
    for i, tailored in enumerate(content.get("experienceWithRelevance") or []):
        source = resume_experience[i] if i < len(resume_experience) else {}
        bullets = "".join(f"<li>{escape(b)}</li>" for b in (tailored.get("bullets") or []))
        items.append(
            {
                **_item(),
                "company": source.get("employer") or "Company",
                "position": source.get("title") or "Role",
                "location": source.get("location") or "",
                "period": format_period(source.get("startDate"), source.get("endDate")),
                "website": _website(),
                "description": f"<ul>{bullets}</ul>" if bullets else _multiline(source.get("description")),
            }
        )
    return items


def _education(resume_education: List[dict]) -> List[dict]:
    return [
        {
            **_item(),
            "school": edu.get("institution") or "",
            "degree": edu.get("degree") or "",
            "area": edu.get("field") or "",
            "grade": edu.get("gpa") or "",
            "location": edu.get("location") or "",
            "period": format_period(edu.get("startDate"), edu.get("endDate")),
            "website": _website(),
            "description": "",
        }
        for edu in resume_education[:MAX_EDUCATION_ITEMS]
    ]


def _skills(content: Dict[str, Any]) -> List[dict]:
    return [
        {
            **_item(),
            "icon": "",
            "name": group.get("name") or "Skills",
            "proficiency": "intermediate",
            "level": 2.5,
            "keywords": list(group.get("keywords") or []),
        }
        for group in (content.get("tailoredSkills") or [])
    ]


def build_reactive_resume_json(document: Any, resume: Any, template: Any = None) -> Dict[str, Any]:
    """Build the Reactive Resume import payload ``{"data": {...}}``.

    Template metadata, when present, is shallow-merged over the defaults.
    """
    content = document.content or {}
    contact = resume.contact or {}
    summary_text = content.get("tailoredSummary") or ""

    metadata = dict(DEFAULT_METADATA)
    template_json = getattr(template, "reactive_resume_json", None) or {}
    if template_json.get("metadata"):
        metadata.update(template_json["metadata"])

    sections = {key: _section(title, []) for key, title in EMPTY_SECTIONS}
    sections["experience"] = _section(
        "Experience", _experience(content, resume.experience or [])
    )
    sections["education"] = _section("Education", _education(resume.education or []))
    sections["skills"] = _section("Skills", _skills(content))

    data = {
        "picture": {
            "hidden": True,
            "url": "",
            "size": 128,
            "rotation": 0,
            "aspectRatio": 1,
            "borderRadius": 0,
            "borderColor": "",
            "borderWidth": 0,
            "shadowColor": "",
            "shadowWidth": 0,
        },
        "basics": {
            "name": contact.get("fullName") or "Candidate",
            "headline": "",
            "email": contact.get("email") or "",
            "phone": contact.get("phone") or "",
            "location": format_location(contact.get("location")),
            "website": _website(contact.get("website") or contact.get("portfolio")),
            "customFields": [],
        },
        "summary": {
            "title": "Summary",
            "columns": 1,
            "hidden": not summary_text,
            "content": _multiline(summary_text),
        },
        "sections": sections,
        "customSections": [],
        "metadata": metadata,
    }
    return {"data": data}


def _raise_for_status(response: requests.Response, what: str) -> None:
    if not response.ok:
        raise RendererError(
            f"{what} failed: {response.status_code} {response.text[:ERROR_BODY_LIMIT]}"
        )


class ReactiveResumeClient:
    """Thin client for the Reactive Resume OpenAPI."""

    def __init__(self, config: ExportConfig):
        if not config.reactive_resume_enabled:
            raise ExportConfigurationError(NOT_CONFIGURED_MESSAGE)
        self.base_url = config.rxresume_base_url.rstrip("/")
        self.timeout = config.request_timeout
        self.headers = {"x-api-key": config.rxresume_api_key}

    def import_resume(self, payload: Dict[str, Any]) -> str:
        """Import a resume and return its Reactive Resume id."""
        response = requests.post(
            f"{self.base_url}/api/openapi/resume/import",
            json=payload,
            headers=self.headers,
            timeout=self.timeout,
        )
        _raise_for_status(response, "Reactive Resume import")
        body = response.json()
        # The endpoint has answered both a bare id and {"id": ...}
        if isinstance(body, str):
            return body
        if isinstance(body, dict) and body.get("id"):
            return str(body["id"])
        return str(body)

    def get_pdf_url(self, rr_resume_id: str) -> str:
        response = requests.get(
            f"{self.base_url}/api/openapi/printer/resume/{quote(rr_resume_id, safe='')}/pdf",
            headers=self.headers,
            timeout=self.timeout,
        )
        _raise_for_status(response, "Reactive Resume PDF export")
        body = response.json()
        pdf_url = body.get("url") if isinstance(body, dict) else None
        if not pdf_url:
            raise RendererError("Reactive Resume did not return a PDF URL")
        return pdf_url

    def download(self, url: str) -> bytes:
        response = requests.get(url, timeout=self.timeout)
        _raise_for_status(response, "PDF download from Reactive Resume")
        return response.content

    def render_pdf(self, payload: Dict[str, Any]) -> Tuple[bytes, str]:
        """Run the full import/print/download cycle.

        Returns:
            Tuple[bytes, str]: PDF bytes and the Reactive Resume resume id
        """
        rr_resume_id = self.import_resume(payload)
        logger.info(f"Imported resume into Reactive Resume as {rr_resume_id}")
        pdf_url = self.get_pdf_url(rr_resume_id)
        return self.download(pdf_url), rr_resume_id
