"""Lookup of text extractors by filename extension."""

from __future__ import annotations

from pathlib import PurePath

from design_copilot.interfaces.text_extractor import ITextExtractor
from design_copilot.providers.extractor.pdf_extractor import PDFTextExtractor
from design_copilot.providers.extractor.plain_text_extractor import PlainTextExtractor
from design_copilot.utils.errors import InvalidInputError


class ExtractorRegistry:
    """Maps lowercase file extensions to :class:`ITextExtractor` instances.

    Later registrations win, so callers can override the built-in handling
    of an extension.
    """

    def __init__(self, extractors: list[ITextExtractor] | None = None) -> None:
        self._by_extension: dict[str, ITextExtractor] = {}
        for extractor in extractors if extractors is not None else _default_extractors():
            self.register(extractor)

    def register(self, extractor: ITextExtractor) -> None:
        for ext in extractor.supported_types():
            self._by_extension[ext.lower()] = extractor

    def for_filename(self, filename: str) -> ITextExtractor:
        """Return the extractor for *filename*'s extension.

        Raises
        ------
        InvalidInputError
            If no extractor handles the extension.
        """
        ext = PurePath(filename).suffix.lower()
        extractor = self._by_extension.get(ext)
        if extractor is None:
            raise InvalidInputError(message=f"Unsupported file type: {ext or filename!r}")
        return extractor

    def extract(self, filename: str, file_bytes: bytes) -> str:
        return self.for_filename(filename).extract(file_bytes)

    def supported_types(self) -> list[str]:
        return sorted(self._by_extension)


def _default_extractors() -> list[ITextExtractor]:
    return [PlainTextExtractor(), PDFTextExtractor()]
