from typing import Any, Dict, Literal, Optional

from flask import g, jsonify
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy import or_
import logging

from resumegen_api.blueprints.api import api_bp
from resumegen_api.blueprints.api.helpers import json_body, validation_message
from resumegen_api.extensions import db
from resumegen_api.jwt_auth import require_jwt
from resumegen_api.models import GeneratedDocument, Template

logger = logging.getLogger(__name__)

TemplateType = Literal["reactive_resume", "custom_html"]

TEMPLATE_FIELDS = {
    "name": "name",
    "description": "description",
    "templateType": "template_type",
    "reactiveResumeJson": "reactive_resume_json",
    "isPublic": "is_public",
}


class TemplateCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    templateType: TemplateType = "reactive_resume"
    reactiveResumeJson: Optional[Dict[str, Any]] = None
    isPublic: bool = False


class TemplateUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    templateType: Optional[TemplateType] = None
    reactiveResumeJson: Optional[Dict[str, Any]] = None
    isPublic: Optional[bool] = None


def _visible_templates():
    """Global templates, the caller's own and anything shared publicly."""
    return Template.query.filter(
        or_(
            Template.user_id.is_(None),
            Template.user_id == g.user_sub,
            Template.is_public.is_(True),
        )
    )


def _editable_template(template_id, action):
    """Return (template, error response) for a write by the caller."""
    template = db.session.get(Template, template_id)
    if not template:
        return None, (jsonify({"error": "Template not found"}), 404)
    if template.is_system:
        return None, (jsonify({"error": f"System templates cannot be {action}"}), 403)
    if template.user_id != g.user_sub:
        return None, (jsonify({"error": "Forbidden"}), 403)
    return template, None


def _apply(template: Template, fields: dict):
    for key, column in TEMPLATE_FIELDS.items():
        if key not in fields:
            continue
        value = fields[key]
        if value is None and key in ("name", "templateType", "isPublic"):
            continue
        setattr(template, column, value)


@api_bp.route("/templates", methods=["GET"])
@require_jwt
def list_templates():
    """List templates the caller can use, default first"""
    try:
        templates = (
            _visible_templates()
            .order_by(Template.is_default.desc(), Template.name.asc())
            .all()
        )
        return jsonify(
            {
                "success": True,
                "data": [t.to_dict() for t in templates],
                "total": len(templates),
            }
        )
    except Exception as e:
        logger.error(f"Error listing templates: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/templates", methods=["POST"])
@require_jwt
def create_template():
    try:
        body = TemplateCreateRequest.model_validate(json_body())
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    try:
        template = Template(user_id=g.user_sub)
        _apply(template, body.model_dump())
        db.session.add(template)
        db.session.commit()
        logger.info(f"Created template {template.id} for user {g.user_sub}")
        return jsonify({"success": True, "data": template.to_dict()}), 201
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error creating template: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/templates/<int:template_id>", methods=["GET"])
@require_jwt
def get_template(template_id):
    try:
        template = _visible_templates().filter(Template.id == template_id).first()
        if not template:
            return jsonify({"error": "Template not found"}), 404
        return jsonify(template.to_dict())
    except Exception as e:
        logger.error(f"Error fetching template {template_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/templates/<int:template_id>", methods=["PUT"])
@require_jwt
def update_template(template_id):
    try:
        body = TemplateUpdateRequest.model_validate(json_body())
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    try:
        template, error = _editable_template(template_id, "updated")
        if error:
            return error
        _apply(template, body.model_dump(exclude_unset=True))
        db.session.commit()
        return jsonify(template.to_dict())
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error updating template {template_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/templates/<int:template_id>", methods=["DELETE"])
@require_jwt
def delete_template(template_id):
    """Delete a user template; documents using it fall back to the default"""
    try:
        template, error = _editable_template(template_id, "deleted")
        if error:
            return error
        GeneratedDocument.query.filter_by(template_id=template.id).update(
            {"template_id": None}, synchronize_session=False
        )
        db.session.delete(template)
        db.session.commit()
        return jsonify({"success": True})
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error deleting template {template_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500
