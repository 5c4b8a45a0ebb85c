"""API tests using FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from main import app, get_pay_data_service, status_for
from services.errors import ElementNotFound, RuleParseError, TableNotFound, UnsupportedStrategy
from services.extractors.base_extractor import DocumentContent


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_conversion(monkeypatch, make_pay_stub, make_pages):
    """Convert every upload to the standard pay stub"""
    text = make_pay_stub()
    document = DocumentContent(text=text, pages=make_pages(text), extractor_name="fake")
    for strategy in ["regex", "position-index"]:
        service = get_pay_data_service(strategy, None)
        monkeypatch.setattr(service.pdf_processor, "process_pdf", lambda filepath, backend=None: document)


def pdf_upload(name="stub.pdf"):
    return (name, b"%PDF-1.4 fake", "application/pdf")


class TestStatusFor:
    """Tests for error to status mapping."""

    @pytest.mark.parametrize("error,status", [
        (RuleParseError("bad", "{"), 400),
        (UnsupportedStrategy("x", ["regex"]), 400),
        (TableNotFound("Taxes", "text"), 422),
        (ElementNotFound(1, text="Net Pay"), 422),
        (FileNotFoundError("missing"), 404),
        (ValueError("bad backend"), 400),
        (RuntimeError("boom"), 500),
    ])
    def test_status(self, error, status):
        """Test each error kind maps to its status."""
        assert status_for(error) == status


class TestHealth:
    """Tests for health endpoints."""

    @pytest.mark.parametrize("path", ["/", "/api/health"])
    def test_healthy(self, client, path):
        """Test the service reports healthy."""
        response = client.get(path)
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestExtractText:
    """Tests for extraction from converted text."""

    def test_happy_path(self, client, pay_stub_text, expected_pay_data):
        """Test text is extracted into camelCase pay data."""
        response = client.post("/api/extract/text", json={"text": pay_stub_text})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["strategy"] == "regex"
        assert body["data"] == expected_pay_data

    def test_rule_mismatch(self, client, make_pay_stub, sections):
        """Test a missing required field is a 422 naming the group."""
        check = sections["check"].replace("Voucher Number | 7777\n", "")
        response = client.post("/api/extract/text", json={"text": make_pay_stub(check=check)})
        assert response.status_code == 422
        assert "checkNumber" in response.json()["detail"]

    def test_empty_text(self, client):
        """Test empty text fails request validation."""
        assert client.post("/api/extract/text", json={"text": ""}).status_code == 422


class TestExtractFile:
    """Tests for single file extraction."""

    def test_happy_path(self, client, fake_conversion, expected_pay_data):
        """Test an uploaded PDF is extracted."""
        response = client.post("/api/extract", files={"file": pdf_upload()})
        assert response.status_code == 200
        assert response.json()["filename"] == "stub.pdf"
        assert response.json()["data"] == expected_pay_data

    def test_position_index(self, client, fake_conversion, expected_pay_data):
        """Test the strategy is selected by query parameter."""
        response = client.post("/api/extract", params={"strategy": "position-index"}, files={"file": pdf_upload()})
        assert response.status_code == 200
        assert response.json()["strategy"] == "position-index"
        assert response.json()["data"] == expected_pay_data

    def test_non_pdf(self, client):
        """Test non-PDF uploads are rejected."""
        response = client.post("/api/extract", files={"file": ("stub.txt", b"text", "text/plain")})
        assert response.status_code == 400

    def test_unknown_strategy(self, client):
        """Test an unknown strategy is a 400 listing valid strategies."""
        response = client.post("/api/extract", params={"strategy": "ocr"}, files={"file": pdf_upload()})
        assert response.status_code == 400
        assert "position-index" in response.json()["detail"]


class TestExtractBatch:
    """Tests for batch extraction."""

    def test_mixed_batch(self, client, fake_conversion):
        """Test a bad file is reported without stopping the batch."""
        response = client.post("/api/extract-batch", files=[
            ("files", pdf_upload("one.pdf")),
            ("files", ("notes.txt", b"text", "text/plain")),
            ("files", pdf_upload("two.pdf")),
        ])
        assert response.status_code == 200
        body = response.json()
        assert body["total_files"] == 3
        assert body["successful"] == 2
        assert body["failed"] == 1
        assert [r["success"] for r in body["results"]] == [True, False, True]

    def test_extraction_failure_category(self, client, monkeypatch):
        """Test a failing file carries its error category."""
        service = get_pay_data_service("regex", None)
        monkeypatch.setattr(
            service.pdf_processor, "process_pdf",
            lambda filepath, backend=None: DocumentContent(text="nothing to see")
        )
        response = client.post("/api/extract-batch", files=[("files", pdf_upload())])
        result = response.json()["results"][0]
        assert result["success"] is False
        assert result["error_category"] == "table_not_found"
