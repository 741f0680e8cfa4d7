"""Validated tuning sections of ``config/config.yaml``.

Frozen so a running service cannot drift from what it validated at startup.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IngestionConfig(BaseModel):
    """Chunking and fan-out parameters for the ingestion pipeline."""

    model_config = ConfigDict(frozen=True)

    chunk_size: int = Field(default=800, ge=1, description="Words per chunk window.")
    chunk_overlap: int = Field(
        default=100, ge=0, description="Words shared by consecutive windows."
    )
    max_concurrency: int = Field(
        default=4, ge=1, description="Concurrent embedding calls per document."
    )

    @model_validator(mode="after")
    def _overlap_below_size(self) -> IngestionConfig:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be less than "
                f"chunk_size ({self.chunk_size})"
            )
        return self


class RetrievalConfig(BaseModel):
    """Similarity search and answer-generation parameters."""

    model_config = ConfigDict(frozen=True)

    top_k: int = Field(default=5, ge=1)
    min_score: float = Field(default=0.7, ge=-1.0, le=1.0)
    no_context_answer: str = "No relevant documents found."
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, ge=1)
    system_prompt: str = (
        "You are an assistant that answers questions strictly from the "
        "document context provided. If the context does not contain the "
        "answer, say so."
    )
