from typing import List, Optional

from flask import g, jsonify
from pydantic import BaseModel, Field, ValidationError
import logging

from resumegen_api.blueprints.api import api_bp
from resumegen_api.blueprints.api.helpers import (
    json_body,
    pagination_args,
    validation_message,
)
from resumegen_api.extensions import db
from resumegen_api.jwt_auth import require_jwt
from resumegen_api.models import GeneratedDocument, JobDescription

logger = logging.getLogger(__name__)

JOB_FIELDS = {
    "title": "title",
    "company": "company",
    "location": "location",
    "url": "url",
    "source": "source",
    "rawText": "raw_text",
    "notes": "notes",
    "tags": "tags",
    "status": "status",
}


class JobRequest(BaseModel):
    """Body for both create and update; every field is optional."""

    title: Optional[str] = Field(None, max_length=200)
    company: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    url: Optional[str] = Field(None, max_length=500)
    source: Optional[str] = Field(None, max_length=100)
    rawText: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = Field(None, max_length=32)


def _owned_job(job_id):
    return JobDescription.query.filter_by(id=job_id, user_id=g.user_sub).first()


def _apply(job: JobDescription, fields: dict):
    for key, column in JOB_FIELDS.items():
        if key in fields:
            setattr(job, column, fields[key])


@api_bp.route("/jobs", methods=["GET"])
@require_jwt
def list_jobs():
    try:
        limit, offset = pagination_args()
        query = JobDescription.query.filter_by(user_id=g.user_sub)
        total = query.count()
        jobs = (
            query.order_by(JobDescription.updated_at.desc(), JobDescription.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return jsonify({"success": True, "data": [j.to_dict() for j in jobs], "total": total})
    except Exception as e:
        logger.error(f"Error listing jobs: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/jobs", methods=["POST"])
@require_jwt
def create_job():
    try:
        body = JobRequest.model_validate(json_body())
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    try:
        job = JobDescription(user_id=g.user_sub)
        _apply(job, body.model_dump())
        db.session.add(job)
        db.session.commit()
        return jsonify(job.to_dict()), 201
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error creating job: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/jobs/<int:job_id>", methods=["GET"])
@require_jwt
def get_job(job_id):
    try:
        job = _owned_job(job_id)
        if not job:
            return jsonify({"error": "Job not found"}), 404
        return jsonify(job.to_dict())
    except Exception as e:
        logger.error(f"Error fetching job {job_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/jobs/<int:job_id>", methods=["PUT"])
@require_jwt
def update_job(job_id):
    try:
        body = JobRequest.model_validate(json_body())
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    try:
        job = _owned_job(job_id)
        if not job:
            return jsonify({"error": "Job not found"}), 404
        _apply(job, body.model_dump(exclude_unset=True))
        db.session.commit()
        return jsonify(job.to_dict())
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error updating job {job_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500


@api_bp.route("/jobs/<int:job_id>", methods=["DELETE"])
@require_jwt
def delete_job(job_id):
    """Delete a saved job; documents tailored to it keep their content"""
    try:
        job = _owned_job(job_id)
        if not job:
            return jsonify({"error": "Job not found"}), 404
        GeneratedDocument.query.filter_by(job_description_id=job.id).update(
            {"job_description_id": None}, synchronize_session=False
        )
        db.session.delete(job)
        db.session.commit()
        return jsonify({"success": True})
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error deleting job {job_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500
