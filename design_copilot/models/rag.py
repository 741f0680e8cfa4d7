"""Document and chunk models for the retrieval layer.

Defines Pydantic v2 models for the records persisted by the document store,
similarity search results, and the outcome of an ingestion run.  All
models use frozen config: documents and chunks are immutable once stored.

How the pieces relate:

    Document (one uploaded text / file, owned by one owner)
      └── Chunk × N (ordinal 0..N-1, text + embedding, same owner)

    findSimilarChunks -> [ScoredChunk(chunk, similarity_score), ...]
    ingest            -> IngestResult(document_id, chunks_stored, chunks_failed, status)
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """One ingested source file or text blob.

    ``chunk_count`` starts at zero and is set once ingestion finishes to
    the number of chunk rows actually stored.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str = Field(description="Opaque unique identifier.")
    owner_id: str = Field(min_length=1, description="Principal the document belongs to.")
    filename: str = Field(description="Original filename supplied by the uploader.")
    size_bytes: int = Field(default=0, ge=0, description="Size of the source payload.")
    chunk_count: int = Field(default=0, ge=0, description="Number of stored chunks.")
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None


class Chunk(BaseModel):
    """One contiguous slice of a document's text together with its embedding."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    document_id: str
    # Duplicated from the parent document so similarity queries can be
    # scoped without a join.
    owner_id: str
    ordinal: int = Field(ge=0, description="0-based position within the document.")
    text: str
    embedding: list[float] = Field(default_factory=list, repr=False)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ScoredChunk(BaseModel):
    """A chunk returned from similarity search with its cosine score."""

    model_config = ConfigDict(frozen=True)

    chunk: Chunk
    similarity_score: float = Field(ge=-1.0, le=1.0)


class IngestStatus(str, Enum):
    """Overall outcome of one ingestion run."""

    COMPLETED = "completed"  # every chunk stored
    PARTIAL = "partial"  # some chunks failed
    FAILED = "failed"  # chunks were produced but none stored
    EMPTY = "empty"  # the text produced no chunks


class IngestResult(BaseModel):
    """Summary returned by :meth:`IngestionService.ingest`."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    chunks_stored: int = Field(default=0, ge=0)
    chunks_failed: int = Field(default=0, ge=0)
    status: IngestStatus

    @property
    def chunk_count(self) -> int:
        return self.chunks_stored

    @property
    def succeeded(self) -> bool:
        return self.status is not IngestStatus.FAILED
