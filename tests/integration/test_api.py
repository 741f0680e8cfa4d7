"""Integration tests for the FastAPI endpoints using TestClient.

The app is built by ``create_app`` with stub providers and a real SQLite
store in a temporary directory, so requests exercise the full
route -> service -> store path.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from design_copilot.config.settings import Settings
from design_copilot.main import build_components, create_app
from design_copilot.utils.errors import ProviderUnavailableError
from tests.conftest import KeywordEmbedder, RecordingLLM

_KEYWORDS = ["button", "blue", "grid", "spacing"]

_CONFIG: dict[str, Any] = {
    "ingestion": {"chunk_size": 5, "chunk_overlap": 1, "max_concurrency": 2},
    "retrieval": {"top_k": 3, "min_score": 0.5},
}

_DOC_TEXT = "The primary button is blue. Use the grid for spacing between cards."


class _FailingEmbedder(KeywordEmbedder):
    async def embed(self, text: str) -> list[float]:
        raise ProviderUnavailableError(provider_name="keyword")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="",
        anthropic_api_key="",
        document_store_path=str(tmp_path / "documents.db"),
    )


def _make_client(tmp_path: Path, embedder=None, llm=None):  # noqa: ANN001, ANN202
    settings = _settings(tmp_path)
    components = build_components(
        settings,
        _CONFIG,
        embedding_provider=embedder or KeywordEmbedder(_KEYWORDS),
        llm_provider=llm or RecordingLLM(["Buttons are blue."]),
    )
    return TestClient(create_app(app_settings=settings, components=components)), components


@pytest.fixture
def client(tmp_path: Path):
    test_client, components = _make_client(tmp_path)
    with test_client:
        yield test_client, components


def _ingest(client: TestClient, owner: str = "alice", text: str = _DOC_TEXT, **extra) -> dict:
    response = client.post(
        "/api/v1/documents",
        json={"owner_id": owner, "filename": "guide.md", "text": text, **extra},
    )
    assert response.status_code == 200, response.text
    return response.json()


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_reports_providers(self, client) -> None:  # noqa: ANN001
        c, _ = client
        body = c.get("/api/v1/health").json()
        assert body["status"] == "healthy"
        assert body["embedding_provider"] == "keyword"
        assert body["llm_provider"] == "recording"
        assert body["document_store"] == "sqlite_document_store"
        assert body["embedding_dimension"] is None

    def test_dimension_recorded_after_ingest(self, client) -> None:  # noqa: ANN001
        c, _ = client
        _ingest(c)
        assert c.get("/api/v1/health").json()["embedding_dimension"] == len(_KEYWORDS)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class TestDocuments:
    def test_ingest_then_list(self, client) -> None:  # noqa: ANN001
        c, _ = client
        result = _ingest(c, metadata={"project": "checkout"})

        assert result["status"] == "completed"
        assert result["chunks_failed"] == 0
        assert result["chunks_stored"] >= 2

        listing = c.get("/api/v1/documents", params={"owner_id": "alice"}).json()
        assert listing["owner_id"] == "alice"
        assert len(listing["documents"]) == 1
        doc = listing["documents"][0]
        assert doc["document_id"] == result["document_id"]
        assert doc["filename"] == "guide.md"
        assert doc["chunk_count"] == result["chunks_stored"]
        assert doc["size_bytes"] == len(_DOC_TEXT.encode("utf-8"))
        assert doc["created_at"] is not None

    def test_explicit_size_kept(self, client) -> None:  # noqa: ANN001
        c, _ = client
        _ingest(c, size_bytes=4096)
        doc = c.get("/api/v1/documents", params={"owner_id": "alice"}).json()["documents"][0]
        assert doc["size_bytes"] == 4096

    def test_list_newest_first(self, client) -> None:  # noqa: ANN001
        c, _ = client
        first = _ingest(c)["document_id"]
        second = _ingest(c)["document_id"]
        docs = c.get("/api/v1/documents", params={"owner_id": "alice"}).json()["documents"]
        assert [d["document_id"] for d in docs] == [second, first]

    def test_empty_owner_is_400(self, client) -> None:  # noqa: ANN001
        c, _ = client
        response = c.post("/api/v1/documents", json={"owner_id": "", "text": "blue button"})
        assert response.status_code == 400
        assert response.json()["error"] == "OwnerRequiredError"

    def test_empty_text_is_400(self, client) -> None:  # noqa: ANN001
        c, _ = client
        response = c.post("/api/v1/documents", json={"owner_id": "alice", "text": "   "})
        assert response.status_code == 400
        assert response.json() == {"error": "InvalidInputError", "detail": "Document text is empty"}

    def test_missing_field_is_422(self, client) -> None:  # noqa: ANN001
        c, _ = client
        assert c.post("/api/v1/documents", json={"owner_id": "alice"}).status_code == 422

    def test_list_without_owner_is_400(self, client) -> None:  # noqa: ANN001
        c, _ = client
        assert c.get("/api/v1/documents").status_code == 400

    def test_delete(self, client) -> None:  # noqa: ANN001
        c, _ = client
        doc_id = _ingest(c)["document_id"]

        # Another owner cannot see or delete it.
        assert c.delete(f"/api/v1/documents/{doc_id}", params={"owner_id": "bob"}).status_code == 404

        assert c.delete(f"/api/v1/documents/{doc_id}", params={"owner_id": "alice"}).status_code == 204
        assert c.get("/api/v1/documents", params={"owner_id": "alice"}).json()["documents"] == []

        response = c.delete(f"/api/v1/documents/{doc_id}", params={"owner_id": "alice"})
        assert response.status_code == 404
        assert response.json()["error"] == "DocumentNotFoundError"

    def test_all_chunks_failing_is_502(self, tmp_path: Path) -> None:
        test_client, _ = _make_client(tmp_path, embedder=_FailingEmbedder(_KEYWORDS))
        with test_client as c:
            response = c.post("/api/v1/documents", json={"owner_id": "alice", "text": _DOC_TEXT})
            assert response.status_code == 502
            body = response.json()
            assert body["status"] == "failed"
            assert body["chunks_stored"] == 0
            assert body["chunks_failed"] >= 1

            # The document record exists with a zero chunk count.
            docs = c.get("/api/v1/documents", params={"owner_id": "alice"}).json()["documents"]
            assert [d["chunk_count"] for d in docs] == [0]


# ---------------------------------------------------------------------------
# Ask
# ---------------------------------------------------------------------------


class TestAsk:
    def test_answer_from_owner_documents(self, client) -> None:  # noqa: ANN001
        c, components = client
        _ingest(c)

        response = c.post("/api/v1/ask", json={"owner_id": "alice", "question": "Which button colour?"})

        assert response.status_code == 200
        assert response.json() == {"answer": "Buttons are blue."}
        llm = components["llm_provider"]
        assert len(llm.calls) == 1
        assert "The primary button is blue." in llm.calls[0]["messages"][0].content

    def test_no_documents_gives_fixed_answer(self, client) -> None:  # noqa: ANN001
        c, components = client
        response = c.post("/api/v1/ask", json={"owner_id": "alice", "question": "Which button?"})
        assert response.json() == {"answer": "No relevant documents found."}
        assert components["llm_provider"].calls == []

    def test_other_owner_documents_invisible(self, client) -> None:  # noqa: ANN001
        c, components = client
        _ingest(c, owner="alice")
        response = c.post("/api/v1/ask", json={"owner_id": "bob", "question": "Which button?"})
        assert response.json() == {"answer": "No relevant documents found."}
        assert components["llm_provider"].calls == []

    def test_empty_question_is_400(self, client) -> None:  # noqa: ANN001
        c, _ = client
        response = c.post("/api/v1/ask", json={"owner_id": "alice", "question": ""})
        assert response.status_code == 400

    def test_empty_completion_is_502(self, tmp_path: Path) -> None:
        test_client, _ = _make_client(tmp_path, llm=RecordingLLM([""]))
        with test_client as c:
            _ingest(c)
            response = c.post("/api/v1/ask", json={"owner_id": "alice", "question": "Which button?"})
            assert response.status_code == 502
            assert response.json()["error"] == "EmptyCompletionError"
