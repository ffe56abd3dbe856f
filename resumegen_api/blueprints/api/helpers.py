"""Request helpers shared by the API route modules."""

from flask import request
from pydantic import ValidationError

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def pagination_args():
    """Read limit/offset from the query string, clamping bad values."""
    limit = request.args.get("limit", type=int)
    offset = request.args.get("offset", type=int)
    if limit is None or limit < 1:
        limit = DEFAULT_LIMIT
    limit = min(limit, MAX_LIMIT)
    if offset is None or offset < 0:
        offset = 0
    return limit, offset


def validation_message(error: ValidationError) -> str:
    """First pydantic error as 'field: message'."""
    errors = error.errors()
    if not errors:
        return "Validation error"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first.get('msg')}" if field else first.get("msg", "Validation error")


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
