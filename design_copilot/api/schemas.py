"""Pydantic request/response schemas for the design copilot API.

Request schemas end with ``Request``, response schemas with ``Response``.
Owner and text fields are left unconstrained here: emptiness is rejected by
the services with :class:`InvalidInputError`, so every entry point (HTTP or
CLI) reports it the same way.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from design_copilot.models.rag import Document, IngestResult, IngestStatus


class IngestDocumentRequest(BaseModel):
    """Body of ``POST /api/v1/documents``."""

    owner_id: str
    filename: str = "untitled.txt"
    text: str
    size_bytes: int | None = Field(
        default=None, ge=0, description="Defaults to the UTF-8 length of ``text``."
    )
    metadata: dict[str, Any] = Field(default_factory=dict)


class IngestDocumentResponse(BaseModel):
    """Outcome of one ingestion run."""

    document_id: str
    chunks_stored: int
    chunks_failed: int
    status: IngestStatus

    @classmethod
    def from_result(cls, result: IngestResult) -> IngestDocumentResponse:
        return cls(
            document_id=result.document_id,
            chunks_stored=result.chunks_stored,
            chunks_failed=result.chunks_failed,
            status=result.status,
        )


class DocumentSummary(BaseModel):
    """One row of ``GET /api/v1/documents``."""

    document_id: str
    filename: str
    size_bytes: int
    chunk_count: int
    created_at: datetime | None = None

    @classmethod
    def from_document(cls, doc: Document) -> DocumentSummary:
        return cls(
            document_id=doc.document_id,
            filename=doc.filename,
            size_bytes=doc.size_bytes,
            chunk_count=doc.chunk_count,
            created_at=doc.created_at,
        )


class DocumentListResponse(BaseModel):
    owner_id: str
    documents: list[DocumentSummary] = Field(default_factory=list)


class AskRequest(BaseModel):
    """Body of ``POST /api/v1/ask``."""

    owner_id: str
    question: str


class AskResponse(BaseModel):
    answer: str


class HealthResponse(BaseModel):
    """Service health and the providers wired in at startup."""

    status: str = "healthy"
    version: str = ""
    embedding_provider: str
    llm_provider: str
    document_store: str
    embedding_dimension: int | None = None


class ErrorResponse(BaseModel):
    """JSON body returned for application errors."""

    error: str
    detail: str | None = None
