# jwt_auth.py
from functools import wraps
from typing import Callable, Optional

import jwt
from flask import current_app, g, jsonify, request

ALGORITHMS = ["HS256"]


def _user_id_from_payload(payload: dict) -> Optional[str]:
    """Tokens carry the user id in 'userId'; standard 'sub' is accepted too."""
    user_id = payload.get("userId") or payload.get("sub")
    return str(user_id) if user_id else None


def require_jwt(fn: Optional[Callable] = None) -> Callable:
    """Require a valid HS256 Bearer token signed with JWT_SECRET.

    Sets ``g.jwt_payload`` and ``g.user_sub`` for the wrapped view. Usable as
    ``@require_jwt`` or ``@require_jwt()``.
    """

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapped(*args, **kwargs):
            auth_header = request.headers.get("Authorization", "")
            if not auth_header.startswith("Bearer "):
                return jsonify({"error": "Missing or invalid authorization"}), 401

            token = auth_header.split(" ", 1)[1]
            try:
                payload = jwt.decode(
                    token,
                    current_app.config["JWT_SECRET"],
                    algorithms=ALGORITHMS,
                    leeway=60,
                )
            except jwt.InvalidTokenError:
                return jsonify({"error": "Invalid or expired token"}), 401

            user_sub = _user_id_from_payload(payload)
            if not user_sub:
                return jsonify({"error": "Invalid or expired token"}), 401

            g.jwt_payload = payload
            g.user_sub = user_sub
            return view(*args, **kwargs)

        return wrapped

    if fn is not None:
        return decorator(fn)
    return decorator
