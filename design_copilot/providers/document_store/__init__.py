"""Document store implementations.

SQLiteDocumentStore is the only concrete IDocumentStore: documents, chunks
and the established embedding dimension live in one SQLite file, and
similarity search is an exact cosine scan over the caller's chunks.
"""

from design_copilot.providers.document_store.sqlite_document_store import SQLiteDocumentStore

__all__ = ["SQLiteDocumentStore"]
