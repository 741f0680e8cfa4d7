"""Application services: document ingestion and question answering."""

from design_copilot.services.ingestion import IngestionService, TextChunker
from design_copilot.services.qa_service import QAService

__all__ = ["IngestionService", "QAService", "TextChunker"]
