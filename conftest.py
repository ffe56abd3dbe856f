from __future__ import annotations

import jwt
import pytest

from resumegen_api.app import create_app
from resumegen_api.extensions import db
from resumegen_api.models import GeneratedDocument, Resume, Template
from resumegen_api.services.export import ExportConfig
from resumegen_api.services.storage import StorageConfig

JWT_SECRET = "test-secret-for-resumegen-api-0123456789"
USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(
        bucket="test-exports",
        region="us-east-1",
        endpoint="http://minio:9000",
        public_endpoint="http://localhost:9000",
        access_key_id="testing",
        secret_access_key="testing",
    )


@pytest.fixture
def export_config() -> ExportConfig:
    return ExportConfig(pdf_printer_url="http://printer:3000", request_timeout=5)


@pytest.fixture
def app(storage_config, export_config):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "JWT_SECRET": JWT_SECRET,
            "STORAGE_CONFIG": storage_config,
            "EXPORT_CONFIG": export_config,
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_token(user_id: str = USER_ID, secret: str = JWT_SECRET) -> str:
    return jwt.encode({"userId": user_id}, secret, algorithm="HS256")


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def resume(app) -> Resume:
    resume = Resume(
        user_id=USER_ID,
        name="My Resume",
        is_default=True,
        contact={
            "fullName": "Ada <Lovelace>",
            "email": "ada@example.com",
            "phone": "555-0100",
            "location": {"city": "London", "country": "UK"},
            "website": "https://ada.example.com",
        },
        experience=[
            {
                "employer": "Analytical Engines Ltd",
                "title": "Programmer",
                "location": "London",
                "startDate": "2020-01-15",
                "endDate": "2023-06-01",
                "description": "Wrote the first algorithm.\nPublished notes.",
            }
        ],
        education=[
            {
                "institution": "University of London",
                "degree": "BSc",
                "field": "Mathematics",
                "startDate": "2015-09-01",
                "endDate": "2019-06-30",
                "gpa": "4.0",
            }
        ],
    )
    db.session.add(resume)
    db.session.commit()
    return resume


@pytest.fixture
def resume_document(resume) -> GeneratedDocument:
    document = GeneratedDocument(
        user_id=USER_ID,
        resume_id=resume.id,
        type="resume",
        content={
            "tailoredSummary": "Tailored summary.\nSecond line.",
            "tailoredSkills": [{"name": "Tech", "keywords": ["Python", "Flask"]}],
            "experienceWithRelevance": [{"bullets": ["Built <engines>", "Shipped"]}],
        },
    )
    db.session.add(document)
    db.session.commit()
    return document


@pytest.fixture
def cover_letter(resume) -> GeneratedDocument:
    document = GeneratedDocument(
        user_id=USER_ID,
        resume_id=resume.id,
        type="cover_letter",
        content={"letterBody": "Dear hiring manager"},
    )
    db.session.add(document)
    db.session.commit()
    return document


@pytest.fixture
def default_template(app) -> Template:
    Template.ensure_default()
    return Template.query.filter_by(is_default=True).first()
