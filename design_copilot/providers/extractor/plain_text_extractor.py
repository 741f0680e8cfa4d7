"""Plain-text extractor for .txt, .md and .csv uploads."""

from __future__ import annotations

from design_copilot.interfaces.text_extractor import ITextExtractor


class PlainTextExtractor(ITextExtractor):
    """Decode UTF-8 bytes, replacing undecodable sequences."""

    def extract(self, file_bytes: bytes) -> str:
        text = file_bytes.decode("utf-8", errors="replace")
        # Strip a leading BOM left behind by some editors.
        return text.lstrip("\ufeff")

    def supported_types(self) -> tuple[str, ...]:
        return (".txt", ".md", ".csv")
