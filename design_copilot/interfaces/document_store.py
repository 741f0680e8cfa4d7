"""Abstract base class for the document/chunk store.

The store persists document metadata and per-chunk records (text,
embedding, ordinal) and answers owner-scoped nearest-neighbour queries.
It is created once per process and injected into the ingestion and
retrieval services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from design_copilot.models.rag import Document, ScoredChunk


# Concrete implementation: SQLiteDocumentStore (design_copilot/providers/document_store/)
class IDocumentStore(ABC):
    """Contract for document persistence and similarity retrieval.

    **Owner scoping** is a hard security invariant: no read path may return
    a chunk whose ``owner_id`` differs from the one the caller passed.

    **Dimensionality** is established by the first stored embedding and
    never changes afterwards; a vector of any other length is rejected
    with :class:`~design_copilot.utils.errors.DimensionMismatchError`.
    """

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    async def initialize(self) -> None:
        """Open the underlying connection and create the schema if missing."""

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    @abstractmethod
    async def create_document(
        self,
        owner_id: str,
        filename: str,
        size_bytes: int,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Create a document record and return its identifier.

        Raises
        ------
        design_copilot.utils.errors.OwnerRequiredError
            If *owner_id* is empty.
        """

    @abstractmethod
    async def append_chunk(
        self,
        document_id: str,
        owner_id: str,
        ordinal: int,
        text: str,
        embedding: list[float],
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Store one chunk of *document_id* and return the chunk identifier.

        Safe to call concurrently for different ordinals of the same
        document.

        Raises
        ------
        design_copilot.utils.errors.DocumentNotFoundError
            If *document_id* is unknown.
        design_copilot.utils.errors.DimensionMismatchError
            If ``len(embedding)`` differs from the store's dimension.
        design_copilot.utils.errors.OrdinalConflictError
            If *ordinal* is already taken for this document.
        """

    @abstractmethod
    async def refresh_chunk_count(self, document_id: str) -> int:
        """Set the document's chunk count to its stored chunk rows and return it."""

    @abstractmethod
    async def delete_document(self, document_id: str, owner_id: str) -> bool:
        """Delete a document and all of its chunks.

        Returns ``False`` when no document with that id belongs to *owner_id*.
        """

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @abstractmethod
    async def find_similar_chunks(
        self,
        owner_id: str,
        query_embedding: list[float],
        top_k: int = 5,
        min_score: float = 0.7,
    ) -> list[ScoredChunk]:
        """Return up to *top_k* of the owner's chunks most similar to the query.

        Results are ordered by descending cosine similarity, ties broken by
        ascending ordinal.  Chunks scoring below *min_score* are excluded;
        the list is never padded.  An owner with no chunks yields ``[]``.
        """

    @abstractmethod
    async def get_document(self, document_id: str) -> Document | None:
        """Return a document by id, or ``None``."""

    @abstractmethod
    async def list_documents(self, owner_id: str) -> list[Document]:
        """Return the owner's documents, newest first."""

    @abstractmethod
    async def get_dimension(self) -> int | None:
        """Return the established embedding dimension, ``None`` if nothing stored yet."""

    @abstractmethod
    async def ensure_dimension(self, dimension: int) -> None:
        """Fail fast when *dimension* differs from the established one.

        Called at startup with the configured embedder's dimension.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"sqlite_document_store"``."""
