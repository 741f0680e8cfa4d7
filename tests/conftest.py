"""Shared pytest fixtures for the design copilot test suite."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

import pytest

from design_copilot.interfaces.embedding_provider import IEmbeddingProvider
from design_copilot.interfaces.llm_provider import ILLMProvider
from design_copilot.models.llm import ChatMessage, Completion, TokenUsage
from design_copilot.providers.document_store.sqlite_document_store import SQLiteDocumentStore
from design_copilot.utils.errors import EmptyInputError

# ---------------------------------------------------------------------------
# Stub providers
# ---------------------------------------------------------------------------


class HashEmbedder(IEmbeddingProvider):
    """Deterministic embedder: the same text always maps to the same vector."""

    def __init__(self, dimension: int = 8) -> None:
        self._dimension = dimension
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        if not text.strip():
            raise EmptyInputError(provider_name="hash")
        self.calls.append(text)
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(digest[i] - 127.5) / 127.5 for i in range(self._dimension)]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed(t) for t in texts]

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return "hash"

    def is_available(self) -> bool:
        return True


class KeywordEmbedder(IEmbeddingProvider):
    """Embeds text as keyword counts, so similarity follows shared vocabulary.

    Text with none of the keywords maps to the zero vector and scores 0.0
    against everything.
    """

    def __init__(self, keywords: list[str]) -> None:
        self._keywords = [k.lower() for k in keywords]

    async def embed(self, text: str) -> list[float]:
        if not text.strip():
            raise EmptyInputError(provider_name="keyword")
        words = [w.strip(".,?!:;").lower() for w in text.split()]
        return [float(words.count(k)) for k in self._keywords]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed(t) for t in texts]

    def get_dimension(self) -> int:
        return len(self._keywords)

    def get_provider_name(self) -> str:
        return "keyword"

    def is_available(self) -> bool:
        return True


class RecordingLLM(ILLMProvider):
    """Returns canned completions in order and records every request."""

    def __init__(self, replies: list[str] | None = None) -> None:
        self._replies = list(replies) if replies is not None else ["Stub answer."]
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.2,
        max_tokens: int = 1000,
    ) -> Completion:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        text = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        return Completion(text=text, usage=TokenUsage(input_tokens=10, output_tokens=5), model="stub")

    def get_provider_name(self) -> str:
        return "recording"

    def is_available(self) -> bool:
        return True

    async def validate_credentials(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def hash_embedder() -> HashEmbedder:
    return HashEmbedder()


@pytest.fixture
def recording_llm() -> RecordingLLM:
    return RecordingLLM()


@pytest.fixture
async def store(tmp_path: Path):
    """An initialised SQLiteDocumentStore backed by a temporary file."""
    s = SQLiteDocumentStore(db_path=tmp_path / "documents.db")
    await s.initialize()
    yield s
    await s.close()
