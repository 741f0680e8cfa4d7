"""Ingestion pipeline: chunk, embed and store uploaded documents."""

from design_copilot.services.ingestion.chunker import TextChunker, chunk_text
from design_copilot.services.ingestion.ingestion_service import IngestionService

__all__ = ["IngestionService", "TextChunker", "chunk_text"]
