"""Embedding provider implementations.

Two implementations of IEmbeddingProvider (in selection order):
    1. OpenAIEmbeddingProvider - text-embedding-3-small (1536 dims).
       Requires an API key; also talks to OpenAI-compatible endpoints.
    2. NomicEmbeddingProvider  - nomic-embed-text via Ollama (768 dims).
       Free and local, but requires a running Ollama server.

The two produce different dimensions: a document store populated with one
cannot be queried with the other (startup fails with DimensionMismatchError).
"""

from design_copilot.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from design_copilot.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider", "NomicEmbeddingProvider"]
