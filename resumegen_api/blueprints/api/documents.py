from flask import g, jsonify
import logging

from resumegen_api.blueprints.api import api_bp
from resumegen_api.blueprints.api.helpers import pagination_args
from resumegen_api.extensions import db
from resumegen_api.jwt_auth import require_jwt
from resumegen_api.models import GeneratedDocument

logger = logging.getLogger(__name__)


@api_bp.route("/documents", methods=["GET"])
@require_jwt
def list_documents():
    """List the caller's generated documents, newest first"""
    try:
        limit, offset = pagination_args()
        query = GeneratedDocument.query.filter_by(user_id=g.user_sub)
        total = query.count()
        documents = (
            query.order_by(GeneratedDocument.created_at.desc(), GeneratedDocument.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return jsonify(
            {
                "success": True,
                "data": [document.to_dict() for document in documents],
                "total": total,
            }
        )
    except Exception as e:
        logger.error(f"Error listing documents: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/documents/<int:document_id>", methods=["GET"])
@require_jwt
def get_document(document_id):
    try:
        document = GeneratedDocument.query.filter_by(
            id=document_id, user_id=g.user_sub
        ).first()
        if not document:
            return jsonify({"error": "Document not found"}), 404
        return jsonify(document.to_dict())
    except Exception as e:
        logger.error(f"Error fetching document {document_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/documents/<int:document_id>", methods=["DELETE"])
@require_jwt
def delete_document(document_id):
    """Delete a generated document; exported objects stay in storage"""
    try:
        document = GeneratedDocument.query.filter_by(
            id=document_id, user_id=g.user_sub
        ).first()
        if not document:
            return jsonify({"error": "Document not found"}), 404
        db.session.delete(document)
        db.session.commit()
        return jsonify({"success": True})
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error deleting document {document_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500
