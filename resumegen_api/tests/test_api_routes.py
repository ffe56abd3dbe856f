"""Tests for the health, export and document routes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from botocore.stub import Stubber

from conftest import OTHER_USER_ID, make_token
from resumegen_api.app import create_app
from resumegen_api.extensions import db
from resumegen_api.models import DocumentExport, GeneratedDocument
from resumegen_api.services.export import pdf_printer

PDF_BYTES = b"%PDF-1.4 route test"


class PrinterResponse:
    ok = True
    status_code = 200
    text = ""
    content = PDF_BYTES


@pytest.fixture
def printer(monkeypatch):
    calls = []

    def fake_post(url, **kwargs):
        calls.append(url)
        return PrinterResponse()

    monkeypatch.setattr(pdf_printer.requests, "post", fake_post)
    return calls


@pytest.fixture
def s3_stub(app):
    storage = app.extensions["object_storage"]
    with Stubber(storage.client) as stub:
        yield stub


class TestAppStartup:
    def test_blank_environment_values_use_defaults(self, monkeypatch):
        """Test that blank TTL and timeout variables do not stop the app from starting."""
        monkeypatch.setenv("AWS_S3_URL_TTL_SECONDS", "")
        monkeypatch.setenv("EXPORT_HTTP_TIMEOUT", "")

        app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://"})

        assert app.extensions["object_storage"].config.url_ttl_seconds == 604800
        assert app.extensions["export_service"].config.request_timeout == 60.0


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}

    def test_ready_when_database_answers(self, client):
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.get_json()["status"] == "ready"


class TestAuth:
    """Bearer token checks in front of every API route."""

    def test_export_requires_bearer_token(self, client, resume_document):
        response = client.post("/v1/export/pdf", json={"generatedDocumentId": resume_document.id})
        assert response.status_code == 401

    def test_rejects_token_signed_with_other_secret(self, client, resume_document):
        token = make_token(secret="another-secret-for-resumegen-api-987654")
        headers = {"Authorization": f"Bearer {token}"}
        response = client.post(
            "/v1/export/pdf", json={"generatedDocumentId": resume_document.id}, headers=headers
        )
        assert response.status_code == 401
        assert response.get_json()["error"] == "Invalid or expired token"


class TestExportPdfRoute:
    """POST /v1/export/pdf end to end, with S3 stubbed."""

    def test_returns_signed_url(self, client, auth_headers, resume_document, printer, s3_stub):
        """Test the success body shape, key layout and seven-day expiry."""
        key = f"exports/user-1/{resume_document.id}.pdf"
        s3_stub.add_response("head_bucket", {}, {"Bucket": "test-exports"})
        s3_stub.add_response(
            "put_object",
            {},
            {"Bucket": "test-exports", "Key": key, "Body": PDF_BYTES, "ContentType": "application/pdf"},
        )

        before = datetime.now(timezone.utc)
        response = client.post(
            "/v1/export/pdf", json={"generatedDocumentId": resume_document.id}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.get_json()
        assert set(body) == {"url", "key", "expiresAt"}
        assert body["key"] == key
        assert body["url"].startswith(f"http://localhost:9000/test-exports/{key}?")
        expires_at = datetime.fromisoformat(body["expiresAt"].replace("Z", "+00:00"))
        assert abs(expires_at - (before + timedelta(days=7))) < timedelta(seconds=5)
        assert printer == ["http://printer:3000/pdf"]
        s3_stub.assert_no_pending_responses()
        assert DocumentExport.query.filter_by(storage_key=key).count() == 1

    def test_validates_body(self, client, auth_headers, app):
        response = client.post("/v1/export/pdf", json={}, headers=auth_headers)
        assert response.status_code == 400
        assert "generatedDocumentId" in response.get_json()["error"]

    def test_rejects_non_numeric_id(self, client, auth_headers, app):
        response = client.post(
            "/v1/export/pdf", json={"generatedDocumentId": "abc"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_unknown_document(self, client, auth_headers, app):
        response = client.post("/v1/export/pdf", json={"generatedDocumentId": 999}, headers=auth_headers)
        assert response.status_code == 404
        assert response.get_json()["error"] == "Document not found"

    def test_cover_letter_is_bad_request(self, client, auth_headers, cover_letter, printer):
        response = client.post(
            "/v1/export/pdf", json={"generatedDocumentId": cover_letter.id}, headers=auth_headers
        )
        assert response.status_code == 400
        assert printer == []

    def test_storage_failure_is_500(self, client, auth_headers, resume_document, printer, s3_stub):
        s3_stub.add_client_error("head_bucket", service_error_code="Forbidden", http_status_code=403)

        response = client.post(
            "/v1/export/pdf", json={"generatedDocumentId": resume_document.id}, headers=auth_headers
        )

        assert response.status_code == 500
        assert response.get_json()["error"]
        assert DocumentExport.query.count() == 0

    def test_empty_failure_message_falls_back(
        self, client, auth_headers, app, resume_document, monkeypatch
    ):
        service = app.extensions["export_service"]

        def explode(*args, **kwargs):
            raise RuntimeError()

        monkeypatch.setattr(service, "export_document_to_pdf", explode)

        response = client.post(
            "/v1/export/pdf", json={"generatedDocumentId": resume_document.id}, headers=auth_headers
        )
        assert response.status_code == 500
        assert response.get_json() == {"error": "Export failed"}


class TestDocumentsRoutes:
    """Listing, reading and deleting generated documents."""

    def test_list_only_returns_callers(self, client, auth_headers, resume_document, cover_letter):
        response = client.get("/v1/documents", headers=auth_headers)
        body = response.get_json()

        assert response.status_code == 200
        assert body["success"] is True
        assert body["total"] == 2
        assert {d["id"] for d in body["data"]} == {resume_document.id, cover_letter.id}

        other = {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}
        assert client.get("/v1/documents", headers=other).get_json()["total"] == 0

    def test_pagination_is_clamped(self, client, auth_headers, resume_document, cover_letter):
        response = client.get("/v1/documents?limit=1&offset=-5", headers=auth_headers)
        body = response.get_json()
        assert body["total"] == 2
        assert len(body["data"]) == 1

        response = client.get("/v1/documents?limit=0&offset=1", headers=auth_headers)
        assert len(response.get_json()["data"]) == 1

    def test_get(self, client, auth_headers, resume_document):
        response = client.get(f"/v1/documents/{resume_document.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json()["type"] == "resume"

        other = {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}
        assert client.get(f"/v1/documents/{resume_document.id}", headers=other).status_code == 404

    def test_delete(self, client, auth_headers, resume_document):
        document_id = resume_document.id
        response = client.delete(f"/v1/documents/{document_id}", headers=auth_headers)

        assert response.status_code == 200
        assert db.session.get(GeneratedDocument, document_id) is None
        assert client.delete(f"/v1/documents/{document_id}", headers=auth_headers).status_code == 404
