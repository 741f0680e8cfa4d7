"""SQLite-backed document store.

Persists documents and their embedded chunks to a local SQLite database at
``data/documents.db``.  Uses ``aiosqlite`` for async I/O and ``numpy`` for
the similarity scan.

Similarity search is an exact flat cosine scan over the querying owner's
chunks.  The owner filter is applied in SQL, before any vector is loaded,
so chunks of other owners never reach the scoring step.
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite
import numpy as np
import structlog

from design_copilot.interfaces.document_store import IDocumentStore
from design_copilot.models.rag import Chunk, Document, ScoredChunk
from design_copilot.utils.errors import (
    DimensionMismatchError,
    DocumentNotFoundError,
    DocumentStoreError,
    InvalidInputError,
    OrdinalConflictError,
    OwnerRequiredError,
)

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/documents.db")
_VECTOR_DTYPE = np.dtype("<f4")
_SCORE_DECIMALS = 6

_CREATE_TABLES_SQL = [
    """\
CREATE TABLE IF NOT EXISTS documents (
    seq          INTEGER PRIMARY KEY AUTOINCREMENT,
    document_id  TEXT    NOT NULL UNIQUE,
    owner_id     TEXT    NOT NULL,
    filename     TEXT    NOT NULL,
    size_bytes   INTEGER NOT NULL DEFAULT 0,
    chunk_count  INTEGER NOT NULL DEFAULT 0,
    metadata     TEXT    NOT NULL DEFAULT '{}',
    created_at   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
""",
    """\
CREATE TABLE IF NOT EXISTS chunks (
    chunk_id     TEXT    PRIMARY KEY,
    document_id  TEXT    NOT NULL REFERENCES documents(document_id) ON DELETE CASCADE,
    owner_id     TEXT    NOT NULL,
    ordinal      INTEGER NOT NULL,
    text         TEXT    NOT NULL,
    embedding    BLOB    NOT NULL,
    metadata     TEXT    NOT NULL DEFAULT '{}',
    UNIQUE(document_id, ordinal)
);
""",
    """\
CREATE TABLE IF NOT EXISTS store_meta (
    key    TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);
""",
]

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_documents_owner ON documents(owner_id);",
    "CREATE INDEX IF NOT EXISTS idx_chunks_owner ON chunks(owner_id);",
]

_SELECT_DOCUMENT_SQL = """\
SELECT document_id, owner_id, filename, size_bytes, chunk_count, metadata, created_at
FROM documents
WHERE document_id = ?;
"""

_SELECT_OWNER_CHUNKS_SQL = """\
SELECT c.chunk_id, c.document_id, c.owner_id, c.ordinal, c.text, c.embedding,
       c.metadata, d.seq AS document_seq
FROM chunks c
JOIN documents d ON d.document_id = c.document_id
WHERE c.owner_id = ?;
"""

_DIMENSION_KEY = "embedding_dimension"


class SQLiteDocumentStore(IDocumentStore):
    """SQLite-backed document and chunk persistence with cosine retrieval.

    One connection is opened by :meth:`initialize` and shared for the life
    of the process.  Writes and the similarity scan are serialised by an
    :class:`asyncio.Lock`, so concurrent :meth:`append_chunk` calls for
    different ordinals of one document are safe and a scan never sees a
    chunk row that is later rolled back.
    """

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)
        self._db: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()
        self._dimension: int | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Open the connection and create tables and indices if missing."""
        if self._db is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self._db_path))
        self._db.row_factory = aiosqlite.Row
        await self._db.execute("PRAGMA journal_mode=WAL;")
        await self._db.execute("PRAGMA foreign_keys=ON;")
        for table_sql in _CREATE_TABLES_SQL:
            await self._db.execute(table_sql)
        for idx_sql in _CREATE_INDICES_SQL:
            await self._db.execute(idx_sql)
        await self._db.commit()
        self._dimension = await self._load_dimension()
        logger.info(
            "document_store_initialized",
            path=str(self._db_path),
            dimension=self._dimension,
        )

    async def close(self) -> None:
        if self._db is None:
            return
        await self._db.close()
        self._db = None
        logger.info("document_store_closed", path=str(self._db_path))

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    async def create_document(
        self,
        owner_id: str,
        filename: str,
        size_bytes: int,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        _require_owner(owner_id)
        db = self._conn()
        document_id = str(uuid.uuid4())
        async with self._write_lock:
            await db.execute(
                "INSERT INTO documents (document_id, owner_id, filename, size_bytes, metadata) "
                "VALUES (?, ?, ?, ?, ?)",
                (document_id, owner_id, filename, size_bytes, json.dumps(metadata or {})),
            )
            await db.commit()
        logger.info(
            "document_created",
            document_id=document_id,
            owner_id=owner_id,
            size_bytes=size_bytes,
        )
        return document_id

    async def append_chunk(
        self,
        document_id: str,
        owner_id: str,
        ordinal: int,
        text: str,
        embedding: list[float],
        metadata: dict[str, Any] | None = None,
    ) -> str:
        _require_owner(owner_id)
        if ordinal < 0:
            raise InvalidInputError(
                message=f"Chunk ordinal must be non-negative, got {ordinal}",
                provider_name=self.get_provider_name(),
            )
        if not embedding:
            raise DimensionMismatchError(
                message="Cannot store an empty embedding",
                provider_name=self.get_provider_name(),
            )

        db = self._conn()
        chunk_id = str(uuid.uuid4())
        blob = np.asarray(embedding, dtype=_VECTOR_DTYPE).tobytes()

        async with self._write_lock:
            cursor = await db.execute(
                "SELECT owner_id FROM documents WHERE document_id = ?",
                (document_id,),
            )
            row = await cursor.fetchone()
            # A document owned by someone else is indistinguishable from a missing one.
            if row is None or row["owner_id"] != owner_id:
                raise DocumentNotFoundError(
                    message=f"Document {document_id} not found",
                    provider_name=self.get_provider_name(),
                )

            if self._dimension is not None and len(embedding) != self._dimension:
                raise DimensionMismatchError(
                    message=(
                        f"Embedding has {len(embedding)} dimensions, "
                        f"store holds {self._dimension}"
                    ),
                    provider_name=self.get_provider_name(),
                )

            try:
                if self._dimension is None:
                    await db.execute(
                        "INSERT INTO store_meta (key, value) VALUES (?, ?)",
                        (_DIMENSION_KEY, str(len(embedding))),
                    )
                await db.execute(
                    "INSERT INTO chunks "
                    "(chunk_id, document_id, owner_id, ordinal, text, embedding, metadata) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        chunk_id,
                        document_id,
                        owner_id,
                        ordinal,
                        text,
                        blob,
                        json.dumps(metadata or {}),
                    ),
                )
                await db.commit()
            except sqlite3.IntegrityError as exc:
                await db.rollback()
                raise OrdinalConflictError(
                    message=f"Ordinal {ordinal} already stored for document {document_id}",
                    provider_name=self.get_provider_name(),
                ) from exc
            except sqlite3.Error as exc:
                # Locked, full or corrupt database.
                await db.rollback()
                logger.warning(
                    "chunk_write_failed",
                    document_id=document_id,
                    ordinal=ordinal,
                    error_type=type(exc).__name__,
                )
                raise DocumentStoreError(
                    message=f"Could not store chunk {ordinal} of document {document_id}",
                    provider_name=self.get_provider_name(),
                ) from exc

            if self._dimension is None:
                self._dimension = len(embedding)
                logger.info("embedding_dimension_established", dimension=self._dimension)

        return chunk_id

    async def refresh_chunk_count(self, document_id: str) -> int:
        db = self._conn()
        async with self._write_lock:
            cursor = await db.execute(
                "UPDATE documents SET chunk_count = "
                "(SELECT COUNT(*) FROM chunks WHERE chunks.document_id = documents.document_id) "
                "WHERE document_id = ?",
                (document_id,),
            )
            if cursor.rowcount == 0:
                raise DocumentNotFoundError(
                    message=f"Document {document_id} not found",
                    provider_name=self.get_provider_name(),
                )
            await db.commit()
            cursor = await db.execute(
                "SELECT chunk_count FROM documents WHERE document_id = ?",
                (document_id,),
            )
            row = await cursor.fetchone()
        return int(row["chunk_count"])

    async def delete_document(self, document_id: str, owner_id: str) -> bool:
        _require_owner(owner_id)
        db = self._conn()
        async with self._write_lock:
            cursor = await db.execute(
                "DELETE FROM documents WHERE document_id = ? AND owner_id = ?",
                (document_id, owner_id),
            )
            await db.commit()
        deleted = cursor.rowcount > 0
        logger.info(
            "document_deleted",
            document_id=document_id,
            owner_id=owner_id,
            deleted=deleted,
        )
        return deleted

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    async def find_similar_chunks(
        self,
        owner_id: str,
        query_embedding: list[float],
        top_k: int = 5,
        min_score: float = 0.7,
    ) -> list[ScoredChunk]:
        _require_owner(owner_id)
        if top_k < 1:
            raise InvalidInputError(
                message=f"top_k must be at least 1, got {top_k}",
                provider_name=self.get_provider_name(),
            )
        if self._dimension is not None and len(query_embedding) != self._dimension:
            raise DimensionMismatchError(
                message=(
                    f"Query embedding has {len(query_embedding)} dimensions, "
                    f"store holds {self._dimension}"
                ),
                provider_name=self.get_provider_name(),
            )

        db = self._conn()
        # Reads share the connection with writers; holding the lock keeps
        # another coroutine's uncommitted chunk rows out of the scan.
        async with self._write_lock:
            cursor = await db.execute(_SELECT_OWNER_CHUNKS_SQL, (owner_id,))
            rows = await cursor.fetchall()
        if not rows:
            return []

        matrix = np.vstack([np.frombuffer(r["embedding"], dtype=_VECTOR_DTYPE) for r in rows])
        scores = _cosine_scores(matrix, np.asarray(query_embedding, dtype=np.float64))

        candidates = []
        for row, score in zip(rows, scores):
            if score < min_score:
                continue
            candidates.append((-score, row["ordinal"], row["document_seq"], row["chunk_id"], row))
        candidates.sort(key=lambda c: c[:4])

        results = [
            ScoredChunk(chunk=_row_to_chunk(row), similarity_score=-neg_score)
            for neg_score, _, _, _, row in candidates[:top_k]
        ]
        logger.debug(
            "similar_chunks_found",
            owner_id=owner_id,
            scanned=len(rows),
            returned=len(results),
        )
        return results

    async def get_document(self, document_id: str) -> Document | None:
        db = self._conn()
        cursor = await db.execute(_SELECT_DOCUMENT_SQL, (document_id,))
        row = await cursor.fetchone()
        return _row_to_document(row) if row is not None else None

    async def list_documents(self, owner_id: str) -> list[Document]:
        _require_owner(owner_id)
        db = self._conn()
        cursor = await db.execute(
            "SELECT document_id, owner_id, filename, size_bytes, chunk_count, metadata, created_at "
            "FROM documents WHERE owner_id = ? ORDER BY seq DESC",
            (owner_id,),
        )
        rows = await cursor.fetchall()
        return [_row_to_document(r) for r in rows]

    async def get_dimension(self) -> int | None:
        return self._dimension

    async def ensure_dimension(self, dimension: int) -> None:
        if self._dimension is not None and self._dimension != dimension:
            raise DimensionMismatchError(
                message=(
                    f"Configured embedder produces {dimension} dimensions but the store "
                    f"at {self._db_path} holds {self._dimension}"
                ),
                provider_name=self.get_provider_name(),
            )

    def get_provider_name(self) -> str:
        return "sqlite_document_store"

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            raise DocumentStoreError(
                message="Document store is not initialized",
                provider_name=self.get_provider_name(),
            )
        return self._db

    async def _load_dimension(self) -> int | None:
        cursor = await self._conn().execute(
            "SELECT value FROM store_meta WHERE key = ?",
            (_DIMENSION_KEY,),
        )
        row = await cursor.fetchone()
        return int(row["value"]) if row is not None else None


def _require_owner(owner_id: str) -> None:
    if not owner_id or not owner_id.strip():
        raise OwnerRequiredError(provider_name="sqlite_document_store")


def _cosine_scores(matrix: np.ndarray, query: np.ndarray) -> list[float]:
    """Cosine similarity of every row of *matrix* against *query*.

    Zero-norm vectors score 0.0.  Scores are clamped to [-1, 1] and rounded
    so that floating-point noise cannot reorder equal candidates.
    """
    matrix = matrix.astype(np.float64)
    row_norms = np.linalg.norm(matrix, axis=1)
    query_norm = float(np.linalg.norm(query))
    denominators = row_norms * query_norm
    dots = matrix @ query
    with np.errstate(divide="ignore", invalid="ignore"):
        raw = np.where(denominators > 0, dots / denominators, 0.0)
    clipped = np.clip(raw, -1.0, 1.0)
    return [round(float(s), _SCORE_DECIMALS) for s in clipped]


def _row_to_chunk(row: aiosqlite.Row) -> Chunk:
    return Chunk(
        chunk_id=row["chunk_id"],
        document_id=row["document_id"],
        owner_id=row["owner_id"],
        ordinal=row["ordinal"],
        text=row["text"],
        embedding=np.frombuffer(row["embedding"], dtype=_VECTOR_DTYPE).tolist(),
        metadata=json.loads(row["metadata"]),
    )


def _row_to_document(row: aiosqlite.Row) -> Document:
    return Document(
        document_id=row["document_id"],
        owner_id=row["owner_id"],
        filename=row["filename"],
        size_bytes=row["size_bytes"],
        chunk_count=row["chunk_count"],
        metadata=json.loads(row["metadata"]),
        created_at=datetime.fromisoformat(row["created_at"].replace("Z", "+00:00")),
    )
