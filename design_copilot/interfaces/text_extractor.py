"""Abstract base class for source-file text extractors.

Extraction is kept outside the chunk/embed/store core: the ingestion
service only ever sees plain text.  One extractor handles one family of
file types and is looked up by filename extension.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: PlainTextExtractor, PDFTextExtractor
# Located in: design_copilot/providers/extractor/
class ITextExtractor(ABC):
    """Contract for turning raw file bytes into plain text."""

    @abstractmethod
    def extract(self, file_bytes: bytes) -> str:
        """Return the text content of *file_bytes*.

        Raises
        ------
        design_copilot.utils.errors.InvalidInputError
            If the bytes cannot be parsed as this extractor's format.
        """

    @abstractmethod
    def supported_types(self) -> tuple[str, ...]:
        """Return the lowercase file extensions handled, e.g. ``(".pdf",)``."""
