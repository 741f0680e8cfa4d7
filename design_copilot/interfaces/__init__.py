"""Public interface definitions for all external collaborators.

Every external API or store is accessed through the abstract base classes
defined in this package.  Concrete adapters live in
``design_copilot/providers/`` and are wired together in
``design_copilot/main.py``; unit tests inject fakes instead.

CONCRETE PROVIDER MAP:
    Interface              →  Concrete implementations
    ─────────────────────────────────────────────────────
    IEmbeddingProvider     →  OpenAIEmbeddingProvider, NomicEmbeddingProvider
    ILLMProvider           →  AnthropicLLMProvider, OpenAILLMProvider
    IDocumentStore         →  SQLiteDocumentStore
    ITextExtractor         →  PlainTextExtractor, PDFTextExtractor
"""

from design_copilot.interfaces.document_store import IDocumentStore
from design_copilot.interfaces.embedding_provider import IEmbeddingProvider
from design_copilot.interfaces.llm_provider import ILLMProvider
from design_copilot.interfaces.text_extractor import ITextExtractor

__all__ = [
    "IDocumentStore",
    "IEmbeddingProvider",
    "ILLMProvider",
    "ITextExtractor",
]
