"""Orchestrator for the document ingestion pipeline.

Pipeline stages: **record -> chunk -> embed -> store -> count**.

The :class:`IngestionService` coordinates four collaborators (chunker,
embedding provider, document store, extractor registry) without any of
them knowing about each other:

    1. IDocumentStore.create_document -- the document row exists before any
       chunking work, so a failed run still leaves an auditable record
    2. TextChunker -- splits the text into overlapping word windows
    3. IEmbeddingProvider -- one call per chunk, at most ``max_concurrency``
       in flight
    4. IDocumentStore.append_chunk -- successful chunks written in text order
    5. IDocumentStore.refresh_chunk_count -- document count matches the rows

A failure on one chunk is logged and counted; the remaining chunks are
still stored.  A :class:`ConfigurationError` (such as an embedding
dimension the store rejects) aborts the run instead.  Already-written
chunks are not rolled back if the run is cancelled or aborted part-way,
but the document chunk count is still reconciled; re-ingesting creates a
fresh document.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

import structlog

from design_copilot.models.rag import IngestResult, IngestStatus
from design_copilot.services.ingestion.chunker import TextChunker
from design_copilot.utils.concurrency import throttled_gather
from design_copilot.utils.errors import (
    ConfigurationError,
    CopilotError,
    InvalidInputError,
    OwnerRequiredError,
)

if TYPE_CHECKING:
    from design_copilot.interfaces.document_store import IDocumentStore
    from design_copilot.interfaces.embedding_provider import IEmbeddingProvider
    from design_copilot.providers.extractor.registry import ExtractorRegistry

logger = structlog.get_logger(logger_name=__name__)


class IngestionService:
    """Turns one text payload into a stored, embedded, owner-scoped document.

    Parameters
    ----------
    chunker:
        Splits raw text into overlapping word windows.
    embedding_provider:
        Generates the embedding vector for each chunk.
    document_store:
        Persists the document record and its chunks.
    max_concurrency:
        Upper bound on in-flight embedding calls for one document.
    extractors:
        Optional registry used by :meth:`ingest_file` to turn upload bytes
        into text.
    """

    def __init__(
        self,
        chunker: TextChunker,
        embedding_provider: IEmbeddingProvider,
        document_store: IDocumentStore,
        max_concurrency: int = 4,
        extractors: ExtractorRegistry | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ConfigurationError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._chunker = chunker
        self._embedding_provider = embedding_provider
        self._document_store = document_store
        self._max_concurrency = max_concurrency
        self._extractors = extractors

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest(
        self,
        owner_id: str,
        filename: str,
        raw_text: str,
        size_bytes: int,
        metadata: dict[str, Any] | None = None,
    ) -> IngestResult:
        """Chunk, embed and store *raw_text* as a new document of *owner_id*.

        Returns
        -------
        IngestResult
            ``chunks_stored`` / ``chunks_failed`` counts and the overall
            status.  ``FAILED`` means chunks were produced but none stored.

        Raises
        ------
        InvalidInputError
            If *owner_id* or *raw_text* is empty (before any I/O).
        """
        if not owner_id or not owner_id.strip():
            raise OwnerRequiredError()
        if not raw_text or not raw_text.strip():
            raise InvalidInputError(message="Document text is empty")
        return await self._run(owner_id, filename, raw_text, size_bytes, metadata)

    async def ingest_file(
        self,
        owner_id: str,
        filename: str,
        file_bytes: bytes,
        metadata: dict[str, Any] | None = None,
    ) -> IngestResult:
        """Extract text from an uploaded file, then ingest it.

        A file whose extractor finds no text (e.g. a scanned PDF without a
        text layer) still gets a document record and reports ``EMPTY``.
        """
        if not owner_id or not owner_id.strip():
            raise OwnerRequiredError()
        if self._extractors is None:
            raise ConfigurationError("No extractor registry configured for file ingestion")

        # PDF parsing is CPU-bound; keep it off the event loop.
        text = await asyncio.to_thread(self._extractors.extract, filename, file_bytes)
        return await self._run(owner_id, filename, text, len(file_bytes), metadata)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run(
        self,
        owner_id: str,
        filename: str,
        raw_text: str,
        size_bytes: int,
        metadata: dict[str, Any] | None,
    ) -> IngestResult:
        start = time.monotonic()
        doc_metadata = dict(metadata or {})

        document_id = await self._document_store.create_document(
            owner_id=owner_id,
            filename=filename,
            size_bytes=size_bytes,
            metadata=doc_metadata,
        )

        chunks = self._chunker.chunk(raw_text)
        if not chunks:
            await self._document_store.refresh_chunk_count(document_id)
            logger.warning("ingestion_no_chunks", owner_id=owner_id, document_id=document_id)
            return IngestResult(document_id=document_id, status=IngestStatus.EMPTY)

        # Embeddings may complete in any order; results come back in chunk order.
        semaphore = asyncio.Semaphore(self._max_concurrency)
        embeddings = await throttled_gather(
            [self._embedding_provider.embed(text) for text in chunks],
            semaphore,
        )

        stored = 0
        failed = 0
        try:
            for position, (text, embedding) in enumerate(zip(chunks, embeddings)):
                # A wrong embedding model is fatal for the whole run.
                if isinstance(embedding, ConfigurationError):
                    raise embedding
                if isinstance(embedding, CopilotError):
                    failed += 1
                    self._log_chunk_failure(owner_id, document_id, position, "embed", embedding)
                    continue
                if isinstance(embedding, BaseException):
                    raise embedding

                chunk_metadata = {
                    **doc_metadata,
                    "chunk_index": position,
                    "word_count": len(text.split()),
                }
                try:
                    # Ordinals count only stored chunks so they stay contiguous.
                    await self._document_store.append_chunk(
                        document_id=document_id,
                        owner_id=owner_id,
                        ordinal=stored,
                        text=text,
                        embedding=embedding,
                        metadata=chunk_metadata,
                    )
                except ConfigurationError:
                    raise
                except CopilotError as exc:
                    failed += 1
                    self._log_chunk_failure(owner_id, document_id, position, "store", exc)
                    continue
                stored += 1
        finally:
            # Chunks written before an abort still count towards the document.
            await self._document_store.refresh_chunk_count(document_id)

        if stored == 0:
            status = IngestStatus.FAILED
        elif failed:
            status = IngestStatus.PARTIAL
        else:
            status = IngestStatus.COMPLETED

        elapsed = round(time.monotonic() - start, 2)
        log = logger.warning if status is not IngestStatus.COMPLETED else logger.info
        log(
            "ingestion_complete",
            owner_id=owner_id,
            document_id=document_id,
            chunks_stored=stored,
            chunks_failed=failed,
            status=status.value,
            time_s=elapsed,
        )
        return IngestResult(
            document_id=document_id,
            chunks_stored=stored,
            chunks_failed=failed,
            status=status,
        )

    @staticmethod
    def _log_chunk_failure(
        owner_id: str,
        document_id: str,
        position: int,
        stage: str,
        exc: CopilotError,
    ) -> None:
        logger.warning(
            "chunk_ingest_failed",
            owner_id=owner_id,
            document_id=document_id,
            chunk_index=position,
            stage=stage,
            error_type=type(exc).__name__,
            provider=exc.provider_name,
        )
