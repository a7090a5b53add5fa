"""
Tests for the HTTP API.

Runs the FastAPI app in-process with TestClient and a service built on
InMemoryDocumentStore plus MockEmbeddings.
"""

import io
import threading
import time
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import docx
import pytest
from fastapi.testclient import TestClient

from doc_search.api.app import app, get_service
from doc_search.core import StorageError
from doc_search.embeddings import MockEmbeddings
from doc_search.ingestion import LocalBlobStore
from doc_search.retrieval.store import InMemoryDocumentStore
from doc_search.service import DocumentService


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def service(tmp_path):
    return DocumentService(
        embeddings=MockEmbeddings(dimensions=16),
        store=InMemoryDocumentStore(),
        blobs=LocalBlobStore(tmp_path),
    )


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _docx_bytes(text: str) -> bytes:
    document = docx.Document()
    document.add_paragraph(text)
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# ROUTES
# ---------------------------------------------------------------------------


class TestRoutes:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "Running" in response.json()

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_add_and_list(self, client):
        response = client.post("/api/documents/add", json={"title": "Annual report", "content": "Revenue grew"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Document saved"
        assert body["doc"]["id"]

        listed = client.get("/api/documents/all").json()
        assert [d["title"] for d in listed] == ["Annual report"]

    def test_add_missing_field(self, client):
        response = client.post("/api/documents/add", json={"title": "Only title"})

        assert response.status_code == 400
        assert "content" in response.json()["error"]

    def test_keyword_search(self, client):
        client.post("/api/documents/add", json={"title": "Annual report", "content": "x"})
        client.post("/api/documents/add", json={"title": "Other", "content": "y"})

        results = client.get("/api/documents/search", params={"q": "Report"}).json()

        assert [d["title"] for d in results] == ["Annual report"]

    def test_semantic_search(self, client):
        for i in range(7):
            client.post("/api/documents/add", json={"title": f"Doc {i}", "content": f"content {i}"})

        results = client.get("/api/documents/ai-search", params={"q": "content 3"}).json()

        assert len(results) == 5
        assert results[0]["title"] == "Doc 3"
        assert results[0]["score"] == pytest.approx(1.0)
        scores = [r["score"] for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_search_without_query(self, client):
        assert client.get("/api/documents/search").status_code == 400

    def test_get_and_delete(self, client):
        doc_id = client.post("/api/documents/add", json={"title": "T", "content": "C"}).json()["doc"]["id"]

        assert client.get(f"/api/documents/{doc_id}").json()["title"] == "T"
        assert client.delete(f"/api/documents/{doc_id}").json() == {"message": "Document deleted"}
        assert client.get(f"/api/documents/{doc_id}").status_code == 404
        assert client.delete(f"/api/documents/{doc_id}").status_code == 404


# ---------------------------------------------------------------------------
# UPLOADS
# ---------------------------------------------------------------------------


class TestUpload:
    def test_upload_docx(self, client, tmp_path):
        response = client.post(
            "/api/documents/upload",
            files={"file": ("notes.docx", _docx_bytes("Quarterly planning notes"), "application/octet-stream")},
        )

        assert response.status_code == 200
        doc = response.json()["doc"]
        assert doc["title"] == "notes.docx"
        assert doc["content"] == "Quarterly planning notes"
        assert doc["file_path"].startswith("file://")
        assert len(list(tmp_path.iterdir())) == 1

    def test_upload_unsupported(self, client, tmp_path):
        response = client.post(
            "/api/documents/upload",
            files={"file": ("notes.txt", b"plain text", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Only PDF and DOCX supported")
        assert list(tmp_path.iterdir()) == []

    def test_upload_corrupt(self, client):
        response = client.post(
            "/api/documents/upload",
            files={"file": ("broken.docx", b"not a zip", "application/octet-stream")},
        )

        assert response.status_code == 422


# ---------------------------------------------------------------------------
# STORAGE FAILURES
# ---------------------------------------------------------------------------


class TestStorageFailure:
    def test_storage_error_is_500(self):
        store = MagicMock()
        store.fetch_all.side_effect = StorageError("db down")
        broken = DocumentService(embeddings=MockEmbeddings(dimensions=4), store=store)
        app.dependency_overrides[get_service] = lambda: broken
        try:
            response = TestClient(app).get("/api/documents/all")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "Something went wrong"}


# ---------------------------------------------------------------------------
# SERVICE SINGLETON
# ---------------------------------------------------------------------------


class TestGetService:
    def test_concurrent_first_requests_share_one_service(self):
        built = []

        def slow_build():
            time.sleep(0.2)
            service = MagicMock()
            built.append(service)
            return service

        request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))
        handed_out = []

        with patch("doc_search.api.app.build_service", side_effect=slow_build):
            threads = [threading.Thread(target=lambda: handed_out.append(get_service(request))) for _ in range(2)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert len(built) == 1
        assert handed_out[0] is handed_out[1] is built[0]

    def test_reuses_service_on_app_state(self):
        existing = MagicMock()
        request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(service=existing)))

        with patch("doc_search.api.app.build_service") as mock_build:
            assert get_service(request) is existing

        mock_build.assert_not_called()
