from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

PERIOD_SEPARATOR = " – "


def format_month(value: Any) -> str:
    """Render a date-ish value as 'Jan 2024'; unparseable strings pass through."""
    if isinstance(value, (date, datetime)):
        return value.strftime("%b %Y")
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).strftime("%b %Y")
    except ValueError:
        return text


def format_period(start: Any, end: Any) -> str:
    return PERIOD_SEPARATOR.join(format_month(v) for v in (start, end) if v)


def format_location(location: Optional[Dict[str, Any]]) -> str:
    location = location or {}
    parts: Iterable[Optional[str]] = (
        location.get("city"),
        location.get("state"),
        location.get("country"),
    )
    return ", ".join(p for p in parts if p)
