"""
Standalone HTML rendering of a tailored resume.

Used with the headless printer when no Reactive Resume instance is configured.
All user-provided text is escaped by Jinja autoescaping.
"""

from __future__ import annotations

from typing import Any, Dict, List

from jinja2 import Environment
from markupsafe import Markup, escape

from .formatting import format_location, format_period

MAX_EDUCATION_ITEMS = 5


def _nl2br(value: Any) -> Markup:
    return Markup("<br/>").join(escape(value or "").split("\n"))


_env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
_env.filters["nl2br"] = _nl2br

RESUME_TEMPLATE = _env.from_string(
    """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Resume – {{ name }}</title>
  <style>
    body { font-family: system-ui, -apple-system, sans-serif; font-size: 11pt; line-height: 1.4; color: #222; max-width: 800px; margin: 0 auto; padding: 20px; }
    h1 { font-size: 22pt; margin: 0 0 8px 0; }
    .contact { color: #444; font-size: 10pt; margin-bottom: 16px; }
    .contact span + span::before { content: " · "; }
    h2 { font-size: 12pt; text-transform: uppercase; letter-spacing: 0.05em; border-bottom: 1px solid #ccc; margin: 16px 0 8px 0; padding-bottom: 4px; }
    .job { margin-bottom: 12px; }
    .job-title { font-weight: 600; }
    .job-meta { color: #555; font-size: 10pt; margin-bottom: 4px; }
    ul { margin: 4px 0; padding-left: 20px; }
    .edu-item { margin-bottom: 8px; }
    .skills p { margin: 2px 0; }
  </style>
</head>
<body>
  <h1>{{ name }}</h1>
  <div class="contact">
{% for item in contact_items %}
    <span>{{ item }}</span>
{% endfor %}
  </div>
{% if summary %}
  <h2>Summary</h2>
  <p>{{ summary | nl2br }}</p>
{% endif %}
{% if experience %}
  <h2>Experience</h2>
{% for job in experience %}
  <div class="job">
    <div class="job-title">{{ job.title }}</div>
    <div class="job-meta">{{ job.employer }}{% if job.period %} · {{ job.period }}{% endif %}</div>
{% if job.bullets %}
    <ul>
{% for bullet in job.bullets %}
      <li>{{ bullet }}</li>
{% endfor %}
    </ul>
{% else %}
    <div>{{ job.description | nl2br }}</div>
{% endif %}
  </div>
{% endfor %}
{% endif %}
{% if education %}
  <h2>Education</h2>
{% for edu in education %}
  <div class="edu-item"><strong>{{ edu.degree }}{% if edu.field %}, {{ edu.field }}{% endif %}</strong> – {{ edu.institution }}{% if edu.period %} · {{ edu.period }}{% endif %}</div>
{% endfor %}
{% endif %}
{% if skills %}
  <h2>Skills</h2>
  <div class="skills">
{% for group in skills %}
    <p><strong>{{ group.name }}:</strong> {{ group.keywords | join(", ") }}</p>
{% endfor %}
  </div>
{% endif %}
</body>
</html>
"""
)


def _experience_items(content: Dict[str, Any], resume_experience: List[dict]) -> List[dict]:
    items = []
    # Tailored entries line up with the source resume's experience by position
    for i, tailored in enumerate(content.get("experienceWithRelevance") or []):
        source = resume_experience[i] if i < len(resume_experience) else {}
        items.append(
            {
                "title": source.get("title") or "Role",
                "employer": source.get("employer") or "Company",
                "period": format_period(source.get("startDate"), source.get("endDate")),
                "bullets": [str(b) for b in (tailored.get("bullets") or [])],
                "description": source.get("description") or "",
            }
        )
    return items


def build_resume_html(document: Any, resume: Any) -> str:
    """Render a GeneratedDocument and its source Resume to a full HTML page."""
    content = document.content or {}
    contact = resume.contact or {}

    contact_items = [
        item
        for item in (
            contact.get("email"),
            contact.get("phone"),
            format_location(contact.get("location")),
        )
        if item
    ]
    education = [
        {
            "institution": edu.get("institution") or "",
            "degree": edu.get("degree") or "",
            "field": edu.get("field") or "",
            "period": format_period(edu.get("startDate"), edu.get("endDate")),
        }
        for edu in (resume.education or [])[:MAX_EDUCATION_ITEMS]
    ]
    skills = [
        {"name": group.get("name") or "Skills", "keywords": group.get("keywords") or []}
        for group in (content.get("tailoredSkills") or [])
    ]

    return RESUME_TEMPLATE.render(
        name=contact.get("fullName") or "Candidate",
        contact_items=contact_items,
        summary=content.get("tailoredSummary") or "",
        experience=_experience_items(content, resume.experience or []),
        education=education,
        skills=skills,
    )
