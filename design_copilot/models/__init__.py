"""Domain models - re-exports all public model classes.

    - config.py - Validated ingestion / retrieval tuning sections
    - llm.py    - Chat messages and completion results
    - rag.py    - Documents, chunks, scored search hits, ingestion results
"""

from __future__ import annotations

from design_copilot.models.config import IngestionConfig, RetrievalConfig
from design_copilot.models.llm import ChatMessage, Completion, TokenUsage
from design_copilot.models.rag import (
    Chunk,
    Document,
    IngestResult,
    IngestStatus,
    ScoredChunk,
)

__all__ = [
    "ChatMessage",
    "Chunk",
    "Completion",
    "Document",
    "IngestResult",
    "IngestStatus",
    "IngestionConfig",
    "RetrievalConfig",
    "ScoredChunk",
    "TokenUsage",
]
