"""Retrieval-augmented question answering over an owner's documents.

Data flow for one question:

  1. VALIDATE  -- reject an empty owner or question before any I/O.
  2. EMBED     -- embed the question with the same provider used at
                  ingestion time (the store rejects mismatched dimensions).
  3. RETRIEVE  -- top-k owner-scoped chunks at or above ``min_score``.
  4. SHORT-CIRCUIT -- no chunks means a fixed "no relevant documents"
                  answer; the LLM is not called.
  5. SYNTHESIZE -- chunk texts, most similar first, joined by blank lines
                  into a context block and sent with the question.

Query-time failures abort the request; there is no partial answer.
"""

from __future__ import annotations

import structlog

from design_copilot.interfaces.document_store import IDocumentStore
from design_copilot.interfaces.embedding_provider import IEmbeddingProvider
from design_copilot.interfaces.llm_provider import ILLMProvider
from design_copilot.models.config import RetrievalConfig
from design_copilot.models.llm import ChatMessage
from design_copilot.models.rag import ScoredChunk
from design_copilot.utils.errors import (
    EmptyCompletionError,
    InvalidInputError,
    OwnerRequiredError,
)
from design_copilot.utils.logging import get_logger
from design_copilot.utils.retry import RetryPolicy

logger: structlog.BoundLogger = get_logger(__name__)


class QAService:
    """Answers an owner's questions from their ingested documents.

    Parameters
    ----------
    embedding_provider:
        Embeds the question.
    document_store:
        Source of owner-scoped similar chunks.
    llm:
        Completion provider that writes the answer.
    retrieval_config:
        ``top_k``, ``min_score``, the no-context answer and generation
        parameters.
    completion_retry:
        Policy applied to the completion call.  Defaults to one retry on
        :class:`EmptyCompletionError`.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        document_store: IDocumentStore,
        llm: ILLMProvider,
        retrieval_config: RetrievalConfig | None = None,
        completion_retry: RetryPolicy | None = None,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._document_store = document_store
        self._llm = llm
        self._config = retrieval_config or RetrievalConfig()
        self._completion_retry = completion_retry or RetryPolicy(
            max_attempts=2,
            base_delay=0.0,
            jitter=0.0,
            retry_on=(EmptyCompletionError,),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def answer(self, owner_id: str, question: str) -> str:
        """Return an answer to *question* grounded in *owner_id*'s documents.

        Raises
        ------
        InvalidInputError
            If *owner_id* or *question* is empty.
        EmptyCompletionError
            If the provider returned no text on both attempts.
        """
        if not owner_id or not owner_id.strip():
            raise OwnerRequiredError()
        if not question or not question.strip():
            raise InvalidInputError(message="Question is empty")

        query_embedding = await self._embedding_provider.embed(question)
        hits = await self._document_store.find_similar_chunks(
            owner_id=owner_id,
            query_embedding=query_embedding,
            top_k=self._config.top_k,
            min_score=self._config.min_score,
        )

        if not hits:
            logger.info(
                "qa_no_context",
                owner_id=owner_id,
                question_length=len(question),
                min_score=self._config.min_score,
            )
            return self._config.no_context_answer

        context = self.build_context(hits)
        answer = await self._completion_retry.run(self._complete, context, question)
        logger.info(
            "qa_answered",
            owner_id=owner_id,
            chunks_used=len(hits),
            top_score=hits[0].similarity_score,
            answer_length=len(answer),
        )
        return answer

    @staticmethod
    def build_context(hits: list[ScoredChunk]) -> str:
        """Join chunk texts in the order given, separated by a blank line."""
        return "\n\n".join(hit.chunk.text for hit in hits)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _complete(self, context: str, question: str) -> str:
        completion = await self._llm.complete(
            system_prompt=self._config.system_prompt,
            messages=[
                ChatMessage(
                    role="user",
                    content=f"Context:\n{context}\n\nQuestion: {question}",
                )
            ],
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )
        text = completion.text.strip()
        if not text:
            logger.warning(
                "qa_empty_completion",
                provider=self._llm.get_provider_name(),
                model=completion.model,
            )
            raise EmptyCompletionError(provider_name=self._llm.get_provider_name())
        return text
