"""FastAPI routes for document ingestion and question answering.

Service dependencies are resolved from ``app.state`` (populated by
the application lifespan in ``main.py``) through ``Depends`` with the ``Annotated``
pattern.

Endpoint                                   Method  Description
/api/v1/documents                          POST    Ingest a text payload
/api/v1/documents?owner_id=                GET     List the owner's documents
/api/v1/documents/{document_id}?owner_id=  DELETE  Delete a document and its chunks
/api/v1/ask                                POST    Answer a question from the owner's documents
/api/v1/health                             GET     Health check + provider names
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response, status

from design_copilot.api.schemas import (
    AskRequest,
    AskResponse,
    DocumentListResponse,
    DocumentSummary,
    HealthResponse,
    IngestDocumentRequest,
    IngestDocumentResponse,
)
from design_copilot.interfaces.document_store import IDocumentStore
from design_copilot.interfaces.embedding_provider import IEmbeddingProvider
from design_copilot.interfaces.llm_provider import ILLMProvider
from design_copilot.models.rag import IngestStatus
from design_copilot.services.ingestion.ingestion_service import IngestionService
from design_copilot.services.qa_service import QAService
from design_copilot.utils.errors import DocumentNotFoundError
from design_copilot.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependency injection helpers
# ---------------------------------------------------------------------------


def _get_ingestion_service(request: Request) -> IngestionService:
    return request.app.state.ingestion_service


def _get_qa_service(request: Request) -> QAService:
    return request.app.state.qa_service


def _get_document_store(request: Request) -> IDocumentStore:
    return request.app.state.document_store


def _get_embedding_provider(request: Request) -> IEmbeddingProvider:
    return request.app.state.embedding_provider


def _get_llm_provider(request: Request) -> ILLMProvider:
    return request.app.state.llm_provider


IngestionDep = Annotated[IngestionService, Depends(_get_ingestion_service)]
QADep = Annotated[QAService, Depends(_get_qa_service)]
StoreDep = Annotated[IDocumentStore, Depends(_get_document_store)]
EmbedderDep = Annotated[IEmbeddingProvider, Depends(_get_embedding_provider)]
LLMDep = Annotated[ILLMProvider, Depends(_get_llm_provider)]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@router.post("/documents", response_model=IngestDocumentResponse)
async def ingest_document(
    body: IngestDocumentRequest,
    response: Response,
    ingestion: IngestionDep,
) -> IngestDocumentResponse:
    """Chunk, embed and store a text payload for ``owner_id``.

    Returns 502 when chunks were produced but none could be stored; a
    partial ingestion still returns 200 with ``chunks_failed > 0``.
    """
    size_bytes = body.size_bytes
    if size_bytes is None:
        size_bytes = len(body.text.encode("utf-8"))

    result = await ingestion.ingest(
        owner_id=body.owner_id,
        filename=body.filename,
        raw_text=body.text,
        size_bytes=size_bytes,
        metadata=body.metadata,
    )
    if result.status is IngestStatus.FAILED:
        _logger.warning("ingest_no_chunks_stored", document_id=result.document_id)
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return IngestDocumentResponse.from_result(result)


@router.get("/documents", response_model=DocumentListResponse)
async def list_documents(
    store: StoreDep,
    owner_id: Annotated[str, Query()] = "",
) -> DocumentListResponse:
    documents = await store.list_documents(owner_id)
    return DocumentListResponse(
        owner_id=owner_id,
        documents=[DocumentSummary.from_document(d) for d in documents],
    )


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    store: StoreDep,
    owner_id: Annotated[str, Query()] = "",
) -> Response:
    deleted = await store.delete_document(document_id, owner_id)
    if not deleted:
        raise DocumentNotFoundError(message=f"Document {document_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Question answering
# ---------------------------------------------------------------------------


@router.post("/ask", response_model=AskResponse)
async def ask(body: AskRequest, qa: QADep) -> AskResponse:
    answer = await qa.answer(owner_id=body.owner_id, question=body.question)
    return AskResponse(answer=answer)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health(
    request: Request,
    store: StoreDep,
    embedder: EmbedderDep,
    llm: LLMDep,
) -> HealthResponse:
    return HealthResponse(
        version=getattr(request.app, "version", ""),
        embedding_provider=embedder.get_provider_name(),
        llm_provider=llm.get_provider_name(),
        document_store=store.get_provider_name(),
        embedding_dimension=await store.get_dimension(),
    )
