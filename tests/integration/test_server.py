"""Integration tests for the HTTP upload service."""

import pytest
from fastapi.testclient import TestClient

from pagetran.core.exceptions import BackendError
from pagetran.core.pipeline import TranslationPipeline
from pagetran.server import create_app
from pagetran.translation.base import TranslationRequest, TranslationResponse

from tests.fixtures.backends import FakeTranslator
from tests.fixtures.pdf_generator import read_page_texts


class RejectingTranslator(FakeTranslator):
    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        raise BackendError(self.name, "quota exceeded", status_code=403)


@pytest.fixture
def make_client(mock_config):
    def _make(backend):
        pipeline = TranslationPipeline(mock_config, backend=backend)
        return TestClient(create_app(mock_config, pipeline=pipeline))
    return _make


def test_health(make_client):
    response = make_client(FakeTranslator()).get("/health")

    assert response.status_code == 200
    assert response.text == "ok"


def test_index_serves_uploader(make_client):
    response = make_client(FakeTranslator()).get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "/api/translate" in response.text


def test_translate_returns_pdf(make_client, pdf_generator, mock_config):
    client = make_client(FakeTranslator(prefix="FR "))
    data = pdf_generator.create_pdf(["Hello world", "Second page text"])

    response = client.post("/api/translate", files={"file": ("paper.pdf", data, "application/pdf")})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == "attachment; filename=translated.pdf"
    texts = read_page_texts(response.content)
    assert len(texts) == 2
    assert "FR Hello world" in texts[0]
    assert list(mock_config.upload_dir.iterdir()) == []


def test_missing_file(make_client):
    response = make_client(FakeTranslator()).post("/api/translate")

    assert response.status_code == 400
    assert response.json() == {"error": "no_file"}


def test_backend_failure_reported(make_client, pdf_generator, mock_config):
    client = make_client(RejectingTranslator())
    data = pdf_generator.create_pdf(["Hello"])

    response = client.post("/api/translate", files={"file": ("paper.pdf", data, "application/pdf")})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "translate_failed"
    assert "quota exceeded" in body["detail"]
    assert list(mock_config.upload_dir.iterdir()) == []


def test_invalid_upload_reported(make_client, mock_config):
    client = make_client(FakeTranslator())

    response = client.post("/api/translate", files={"file": ("notes.pdf", b"plain text", "application/pdf")})

    assert response.status_code == 500
    assert response.json()["error"] == "translate_failed"
    assert list(mock_config.upload_dir.iterdir()) == []
