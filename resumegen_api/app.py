"""
Flask application factory for the ResumeGen API.
Sets up configuration, database, migrations, CORS, the export services, and
registers blueprints.
"""

import os
import time
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask, g, request
from flask_cors import CORS
from dotenv import load_dotenv

# Re-export db for scripts that import from resumegen_api.app
from resumegen_api.extensions import db, migrate
from resumegen_api.services.export import ExportConfig, ExportService
from resumegen_api.services.storage import ObjectStorageClient, StorageConfig

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:3001",
]


def _resolve_database_uri() -> str:
    """Resolve SQLAlchemy database URI from environment.

    Supports dual modes:
    - sqlite via `DATABASE_MODE=sqlite` and `DATABASE_DEV`
    - postgres via `DATABASE_MODE=postgres` and `DATABASE_PROD`
    """
    mode = (os.getenv("DATABASE_MODE") or "sqlite").lower()
    if mode == "postgres":
        uri = os.getenv("DATABASE_PROD")
        if not uri:
            raise RuntimeError("DATABASE_PROD must be set when DATABASE_MODE=postgres")
        return uri
    # default sqlite dev path
    return os.getenv("DATABASE_DEV") or "sqlite:///resumegen.db"


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS")
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _ensure_instance_dir(app: Flask) -> None:
    """Ensure the Flask instance directory exists (for SQLite files)."""
    try:
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # Non-fatal; an absolute database path does not need it
        logger.warning(f"Could not create instance dir {app.instance_path}: {e}")


def _configure_logging(app: Flask) -> None:
    """Info level logging to stderr plus a rotating file, unless already set up."""
    root = logging.getLogger()
    if not root.handlers:
        root.setLevel(logging.INFO)
        formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

        sh = logging.StreamHandler()
        sh.setLevel(logging.INFO)
        sh.setFormatter(formatter)
        root.addHandler(sh)

        log_path = os.getenv("RESUMEGEN_LOG", "resumegen_api.log")
        try:
            fh = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=2)
            fh.setLevel(logging.INFO)
            fh.setFormatter(formatter)
            root.addHandler(fh)
        except OSError as e:
            root.warning(f"File logging disabled ({log_path}): {e}")

    app.logger.setLevel(logging.INFO)


def _register_request_logging(app: Flask) -> None:
    request_logger = logging.getLogger("resumegen_api.requests")

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        request_logger.info(
            f"{request.method} {request.full_path.rstrip('?')} "
            f"{response.status_code} {elapsed_ms:.0f}ms"
        )
        return response


def create_app(config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the Flask application."""
    # Load .env for development convenience
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)
    app.config.update(config_overrides or {})

    # Base config
    if "SQLALCHEMY_DATABASE_URI" not in app.config:
        app.config["SQLALCHEMY_DATABASE_URI"] = _resolve_database_uri()
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    app.config.setdefault("JSON_SORT_KEYS", False)
    app.config.setdefault("SECRET_KEY", os.getenv("SECRET_KEY", "dev-secret-key"))
    app.config.setdefault(
        "JWT_SECRET", os.getenv("JWT_SECRET", "dev-secret-change-in-production")
    )

    _ensure_instance_dir(app)
    _configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Storage configuration is fixed for the life of the process
    storage = ObjectStorageClient(app.config.get("STORAGE_CONFIG") or StorageConfig.from_env())
    export_config = app.config.get("EXPORT_CONFIG") or ExportConfig.from_env()
    app.extensions["object_storage"] = storage
    app.extensions["export_service"] = ExportService(storage, export_config)
    logger.info(
        f"Export bucket '{storage.bucket}' (endpoint={storage.config.endpoint or 'default'}, "
        f"public={storage.config.public_endpoint or 'same'})"
    )

    # Register blueprints
    from resumegen_api.blueprints.health import health_bp
    from resumegen_api.blueprints.api import API_VERSION, api_bp

    # Enable CORS (allow frontend dev server)
    CORS(
        app,
        resources={rf"/{API_VERSION}/*": {"origins": _cors_origins()}},
        supports_credentials=True,
    )

    app.register_blueprint(health_bp)
    app.register_blueprint(api_bp)

    _register_request_logging(app)
    return app
