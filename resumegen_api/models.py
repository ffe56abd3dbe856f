# models.py

from datetime import datetime, timezone

from resumegen_api.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


def _isoformat(value):
    return value.isoformat() if value else None


class Resume(db.Model):
    __tablename__ = "resumes"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    is_default = db.Column(db.Boolean, nullable=False, default=False)

    # Nested resume content, kept in the same shape the dashboard edits
    contact = db.Column(db.JSON, nullable=True)  # fullName, email, phone, location{}
    summary = db.Column(db.JSON, nullable=True)
    skills = db.Column(db.JSON, nullable=True)
    experience = db.Column(db.JSON, nullable=True)
    education = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (db.UniqueConstraint("user_id", "name", name="uq_resume_user_name"),)

    def __repr__(self):
        return f"<Resume {self.id} - {self.name}>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "is_default": self.is_default,
            "contact": self.contact or {},
            "summary": self.summary,
            "skills": self.skills or [],
            "experience": self.experience or [],
            "education": self.education or [],
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }

    @staticmethod
    def get_default_resume(user_id: str):
        """Get the default resume for a user."""
        return Resume.query.filter_by(user_id=user_id, is_default=True).first()


class JobDescription(db.Model):
    __tablename__ = "job_descriptions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String, nullable=False, index=True)
    title = db.Column(db.String(200), nullable=True)
    company = db.Column(db.String(200), nullable=True)
    location = db.Column(db.String(200), nullable=True)
    url = db.Column(db.String(500), nullable=True)
    source = db.Column(db.String(100), nullable=True)
    raw_text = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    tags = db.Column(db.JSON, nullable=True)
    status = db.Column(db.String(32), nullable=True)  # saved | applied | ...
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<JobDescription {self.id} - {self.title} @ {self.company}>"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "url": self.url,
            "source": self.source,
            "raw_text": self.raw_text,
            "notes": self.notes,
            "tags": self.tags or [],
            "status": self.status,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


class Template(db.Model):
    __tablename__ = "templates"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String, nullable=True, index=True)  # NULL = global template
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    template_type = db.Column(db.String(32), nullable=False, default="reactive_resume")
    reactive_resume_json = db.Column(db.JSON, nullable=True)
    is_public = db.Column(db.Boolean, nullable=False, default=False)
    is_default = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Template {self.id} - {self.name}>"

    @property
    def is_system(self):
        return self.user_id is None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "template_type": self.template_type,
            "reactive_resume_json": self.reactive_resume_json,
            "is_public": self.is_public,
            "is_default": self.is_default,
            "is_system": self.is_system,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }

    @staticmethod
    def ensure_default():
        """Seed a global default template when none exists."""
        if Template.query.filter_by(is_default=True).first() is not None:
            return False
        db.session.add(
            Template(
                name="Default",
                description="Default resume template",
                is_default=True,
                user_id=None,
                template_type="reactive_resume",
            )
        )
        db.session.commit()
        return True


class GeneratedDocument(db.Model):
    __tablename__ = "generated_documents"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String, nullable=False, index=True)
    resume_id = db.Column(db.Integer, db.ForeignKey("resumes.id"), nullable=False)
    job_description_id = db.Column(
        db.Integer, db.ForeignKey("job_descriptions.id"), nullable=True
    )
    type = db.Column(db.String(32), nullable=False)  # resume | cover_letter
    # tailoredSummary, tailoredSkills[], experienceWithRelevance[], letterBody, ...
    content = db.Column(db.JSON, nullable=True)
    template_id = db.Column(db.Integer, db.ForeignKey("templates.id"), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    resume = db.relationship("Resume", backref=db.backref("documents", lazy="dynamic"))
    exports = db.relationship(
        "DocumentExport",
        backref="document",
        cascade="all, delete-orphan",
        lazy=True,
        order_by="DocumentExport.generated_at",
    )

    def __repr__(self):
        return f"<GeneratedDocument {self.id} ({self.type})>"

    def to_dict(self):
        return {
            "id": self.id,
            "resume_id": self.resume_id,
            "job_description_id": self.job_description_id,
            "type": self.type,
            "content": self.content or {},
            "template_id": self.template_id,
            "exports": [export.to_dict() for export in self.exports],
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


class DocumentExport(db.Model):
    """History of files delivered for a generated document.

    The stored url is informational only; download links are re-signed on
    every export request.
    """

    __tablename__ = "document_exports"

    id = db.Column(db.Integer, primary_key=True)
    document_id = db.Column(
        db.Integer, db.ForeignKey("generated_documents.id"), nullable=False, index=True
    )
    format = db.Column(db.String(16), nullable=False, default="pdf")
    url = db.Column(db.Text, nullable=True)
    storage_key = db.Column(db.String(500), nullable=True)
    external_id = db.Column(db.String(200), nullable=True)  # Reactive Resume id
    generated_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<DocumentExport {self.id} {self.format} for {self.document_id}>"

    def to_dict(self):
        return {
            "format": self.format,
            "url": self.url,
            "key": self.storage_key,
            "external_id": self.external_id,
            "generated_at": _isoformat(self.generated_at),
            "expires_at": _isoformat(self.expires_at),
        }
