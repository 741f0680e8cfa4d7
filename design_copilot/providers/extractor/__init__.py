"""Text extractors: raw upload bytes to plain text, chosen by extension."""

from design_copilot.providers.extractor.pdf_extractor import PDFTextExtractor
from design_copilot.providers.extractor.plain_text_extractor import PlainTextExtractor
from design_copilot.providers.extractor.registry import ExtractorRegistry

__all__ = ["ExtractorRegistry", "PDFTextExtractor", "PlainTextExtractor"]
