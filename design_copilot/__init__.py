"""Design copilot backend: owner-scoped document ingestion and RAG answers."""

__version__ = "0.1.0"
