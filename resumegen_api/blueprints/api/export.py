from typing import Optional

from flask import current_app, g, jsonify
from pydantic import BaseModel, Field, ValidationError
import logging

from resumegen_api.blueprints.api import api_bp
from resumegen_api.blueprints.api.helpers import json_body, validation_message
from resumegen_api.jwt_auth import require_jwt
from resumegen_api.services.export import (
    DocumentNotFoundError,
    UnsupportedDocumentTypeError,
)

logger = logging.getLogger(__name__)

EXPORT_FAILED_MESSAGE = "Export failed"


class ExportPdfRequest(BaseModel):
    generatedDocumentId: int = Field(..., ge=1)
    templateId: Optional[int] = None


@api_bp.route("/export/pdf", methods=["POST"])
@require_jwt
def export_pdf():
    """Render a resume document to PDF and return a presigned download link"""
    try:
        body = ExportPdfRequest.model_validate(json_body())
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    service = current_app.extensions["export_service"]
    try:
        result = service.export_document_to_pdf(
            body.generatedDocumentId, g.user_sub, body.templateId
        )
    except DocumentNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except UnsupportedDocumentTypeError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(f"PDF export failed for document {body.generatedDocumentId}: {e}")
        return jsonify({"error": str(e) or EXPORT_FAILED_MESSAGE}), 500

    return jsonify(result.to_dict())
