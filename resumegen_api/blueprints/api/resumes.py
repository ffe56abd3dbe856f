from typing import Any, Dict, List, Optional

from flask import g, jsonify
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from resumegen_api.blueprints.api import api_bp
from resumegen_api.blueprints.api.helpers import (
    json_body,
    pagination_args,
    validation_message,
)
from resumegen_api.extensions import db
from resumegen_api.jwt_auth import require_jwt
from resumegen_api.models import GeneratedDocument, Resume

logger = logging.getLogger(__name__)

# request field -> Resume column
RESUME_FIELDS = {
    "name": "name",
    "isDefault": "is_default",
    "contact": "contact",
    "summary": "summary",
    "skills": "skills",
    "experience": "experience",
    "education": "education",
}


class ResumeCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    isDefault: bool = False
    contact: Optional[Dict[str, Any]] = None
    summary: Optional[Any] = None
    skills: Optional[List[Any]] = None
    experience: Optional[List[Dict[str, Any]]] = None
    education: Optional[List[Dict[str, Any]]] = None


class ResumeUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    isDefault: Optional[bool] = None
    contact: Optional[Dict[str, Any]] = None
    summary: Optional[Any] = None
    skills: Optional[List[Any]] = None
    experience: Optional[List[Dict[str, Any]]] = None
    education: Optional[List[Dict[str, Any]]] = None


def _owned_resume(resume_id):
    return Resume.query.filter_by(id=resume_id, user_id=g.user_sub).first()


def _clear_other_defaults(keep_id=None):
    query = Resume.query.filter(Resume.user_id == g.user_sub, Resume.is_default.is_(True))
    if keep_id is not None:
        query = query.filter(Resume.id != keep_id)
    query.update({"is_default": False}, synchronize_session=False)


def _apply(resume: Resume, fields: dict):
    for key, column in RESUME_FIELDS.items():
        if key not in fields:
            continue
        value = fields[key]
        # name and isDefault are not nullable
        if value is None and key in ("name", "isDefault"):
            continue
        setattr(resume, column, value)


@api_bp.route("/resumes", methods=["GET"])
@require_jwt
def list_resumes():
    """List the caller's resumes, most recently edited first"""
    try:
        limit, offset = pagination_args()
        query = Resume.query.filter_by(user_id=g.user_sub)
        total = query.count()
        resumes = (
            query.order_by(Resume.updated_at.desc(), Resume.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return jsonify(
            {"success": True, "data": [r.to_dict() for r in resumes], "total": total}
        )
    except Exception as e:
        logger.error(f"Error listing resumes: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/resumes", methods=["POST"])
@require_jwt
def create_resume():
    try:
        body = ResumeCreateRequest.model_validate(json_body())
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    try:
        if body.isDefault:
            _clear_other_defaults()
        resume = Resume(user_id=g.user_sub)
        _apply(resume, body.model_dump())
        db.session.add(resume)
        db.session.commit()
        logger.info(f"Created resume {resume.id} for user {g.user_sub}")
        return jsonify({"success": True, "data": resume.to_dict()}), 201
    except IntegrityError:
        db.session.rollback()
        return jsonify({"error": "A resume with this name already exists"}), 409
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error creating resume: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/resumes/<int:resume_id>", methods=["GET"])
@require_jwt
def get_resume(resume_id):
    try:
        resume = _owned_resume(resume_id)
        if not resume:
            return jsonify({"error": "Resume not found"}), 404
        return jsonify(resume.to_dict())
    except Exception as e:
        logger.error(f"Error fetching resume {resume_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/resumes/<int:resume_id>", methods=["PUT", "PATCH"])
@require_jwt
def update_resume(resume_id):
    """Update the fields present in the body; absent fields are left alone"""
    try:
        body = ResumeUpdateRequest.model_validate(json_body())
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    try:
        resume = _owned_resume(resume_id)
        if not resume:
            return jsonify({"error": "Resume not found"}), 404
        fields = body.model_dump(exclude_unset=True)
        if fields.get("isDefault"):
            _clear_other_defaults(keep_id=resume.id)
        _apply(resume, fields)
        db.session.commit()
        return jsonify(resume.to_dict())
    except IntegrityError:
        db.session.rollback()
        return jsonify({"error": "A resume with this name already exists"}), 409
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error updating resume {resume_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/resumes/<int:resume_id>", methods=["DELETE"])
@require_jwt
def delete_resume(resume_id):
    """Delete a resume that no generated document still points at"""
    try:
        resume = _owned_resume(resume_id)
        if not resume:
            return jsonify({"error": "Resume not found"}), 404
        if GeneratedDocument.query.filter_by(resume_id=resume.id).count():
            return jsonify({"error": "Resume has generated documents"}), 409
        db.session.delete(resume)
        db.session.commit()
        return jsonify({"success": True})
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error deleting resume {resume_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500
