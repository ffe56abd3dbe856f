from flask import Blueprint, jsonify
from sqlalchemy import text

from resumegen_api.extensions import db

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Liveness probe."""
    return jsonify({"status": "ok"})


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Readiness probe: the database must answer."""
    try:
        db.session.execute(text("SELECT 1"))
    except Exception as e:
        db.session.rollback()
        return jsonify({"status": "not ready", "reason": str(e)}), 503
    return jsonify({"status": "ready"})
