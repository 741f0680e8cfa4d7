"""Unit tests for QAService: retrieval, context assembly and completion."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from design_copilot.models.config import RetrievalConfig
from design_copilot.models.llm import Completion
from design_copilot.models.rag import Chunk, ScoredChunk
from design_copilot.services.qa_service import QAService
from design_copilot.utils.errors import (
    EmptyCompletionError,
    InvalidInputError,
    OwnerRequiredError,
    ProviderUnavailableError,
)
from tests.conftest import KeywordEmbedder, RecordingLLM


def _hit(text: str, score: float, ordinal: int = 0) -> ScoredChunk:
    return ScoredChunk(
        chunk=Chunk(
            chunk_id=f"c-{ordinal}",
            document_id="doc-1",
            owner_id="alice",
            ordinal=ordinal,
            text=text,
        ),
        similarity_score=score,
    )


def _mock_store(hits: list[ScoredChunk]) -> AsyncMock:
    store = AsyncMock()
    store.find_similar_chunks = AsyncMock(return_value=hits)
    return store


def _mock_embedder() -> AsyncMock:
    embedder = AsyncMock()
    embedder.embed = AsyncMock(return_value=[1.0, 0.0])
    return embedder


# ── Validation ────────────────────────────────────────────


class TestValidation:
    @pytest.mark.asyncio
    async def test_empty_owner_rejected(self) -> None:
        embedder = _mock_embedder()
        service = QAService(embedder, _mock_store([]), RecordingLLM())
        with pytest.raises(OwnerRequiredError):
            await service.answer("", "What is the palette?")
        embedder.embed.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("question", ["", "   "])
    async def test_empty_question_rejected(self, question: str) -> None:
        embedder = _mock_embedder()
        service = QAService(embedder, _mock_store([]), RecordingLLM())
        with pytest.raises(InvalidInputError):
            await service.answer("alice", question)
        embedder.embed.assert_not_called()


# ── Retrieval ─────────────────────────────────────────────


class TestRetrieval:
    @pytest.mark.asyncio
    async def test_no_documents_skips_completion(self, store) -> None:  # noqa: ANN001
        llm = RecordingLLM()
        service = QAService(KeywordEmbedder(["button", "colour"]), store, llm)

        answer = await service.answer("alice", "What colour is the button?")

        assert answer == "No relevant documents found."
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_custom_no_context_answer(self) -> None:
        llm = RecordingLLM()
        config = RetrievalConfig(no_context_answer="Nothing on file.")
        service = QAService(_mock_embedder(), _mock_store([]), llm, retrieval_config=config)

        assert await service.answer("alice", "anything?") == "Nothing on file."
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_search_parameters_come_from_config(self) -> None:
        store = _mock_store([])
        config = RetrievalConfig(top_k=3, min_score=0.4)
        service = QAService(_mock_embedder(), store, RecordingLLM(), retrieval_config=config)

        await service.answer("alice", "q?")

        store.find_similar_chunks.assert_awaited_once_with(
            owner_id="alice", query_embedding=[1.0, 0.0], top_k=3, min_score=0.4
        )

    @pytest.mark.asyncio
    async def test_embedding_failure_aborts(self) -> None:
        embedder = _mock_embedder()
        embedder.embed = AsyncMock(side_effect=ProviderUnavailableError())
        llm = RecordingLLM()
        service = QAService(embedder, _mock_store([]), llm)

        with pytest.raises(ProviderUnavailableError):
            await service.answer("alice", "q?")
        assert llm.calls == []


# ── Context and completion ────────────────────────────────


class TestCompletion:
    def test_build_context_keeps_order(self) -> None:
        hits = [_hit("first", 0.9, 0), _hit("second", 0.8, 1), _hit("third", 0.75, 2)]
        assert QAService.build_context(hits) == "first\n\nsecond\n\nthird"

    @pytest.mark.asyncio
    async def test_prompt_carries_context_and_question(self) -> None:
        hits = [_hit("Primary buttons are blue.", 0.95, 0), _hit("Use 8px radius.", 0.8, 1)]
        llm = RecordingLLM(["Blue."])
        config = RetrievalConfig(temperature=0.1, max_tokens=200, system_prompt="Be brief.")
        service = QAService(_mock_embedder(), _mock_store(hits), llm, retrieval_config=config)

        answer = await service.answer("alice", "What colour are buttons?")

        assert answer == "Blue."
        assert len(llm.calls) == 1
        call = llm.calls[0]
        assert call["system_prompt"] == "Be brief."
        assert call["temperature"] == 0.1
        assert call["max_tokens"] == 200
        assert call["messages"][0].role == "user"
        assert call["messages"][0].content == (
            "Context:\nPrimary buttons are blue.\n\nUse 8px radius.\n\n"
            "Question: What colour are buttons?"
        )

    @pytest.mark.asyncio
    async def test_answer_is_stripped(self) -> None:
        llm = RecordingLLM(["  Blue.\n"])
        service = QAService(_mock_embedder(), _mock_store([_hit("x", 0.9)]), llm)
        assert await service.answer("alice", "q?") == "Blue."

    @pytest.mark.asyncio
    async def test_empty_completion_retried_once(self) -> None:
        llm = RecordingLLM(["", "Second try."])
        service = QAService(_mock_embedder(), _mock_store([_hit("x", 0.9)]), llm)

        assert await service.answer("alice", "q?") == "Second try."
        assert len(llm.calls) == 2

    @pytest.mark.asyncio
    async def test_empty_completion_twice_raises(self) -> None:
        llm = RecordingLLM(["   "])
        service = QAService(_mock_embedder(), _mock_store([_hit("x", 0.9)]), llm)

        with pytest.raises(EmptyCompletionError):
            await service.answer("alice", "q?")
        assert len(llm.calls) == 2

    @pytest.mark.asyncio
    async def test_provider_error_not_retried(self) -> None:
        llm = AsyncMock()
        llm.complete = AsyncMock(side_effect=ProviderUnavailableError(provider_name="stub"))
        llm.get_provider_name = lambda: "stub"
        service = QAService(_mock_embedder(), _mock_store([_hit("x", 0.9)]), llm)

        with pytest.raises(ProviderUnavailableError):
            await service.answer("alice", "q?")
        assert llm.complete.await_count == 1

    @pytest.mark.asyncio
    async def test_completion_object_text_used(self) -> None:
        llm = AsyncMock()
        llm.complete = AsyncMock(return_value=Completion(text="From mock.", model="m"))
        service = QAService(_mock_embedder(), _mock_store([_hit("x", 0.9)]), llm)

        assert await service.answer("alice", "q?") == "From mock."
