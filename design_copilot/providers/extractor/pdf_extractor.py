"""PDF text extractor backed by PyMuPDF.

Reads the PDF from memory, extracts text page-by-page and joins the
non-empty pages with blank lines.  Scanned PDFs without a text layer yield
an empty string; no OCR is attempted.
"""

from __future__ import annotations

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from design_copilot.interfaces.text_extractor import ITextExtractor
from design_copilot.utils.errors import InvalidInputError

logger = structlog.get_logger(logger_name=__name__)


class PDFTextExtractor(ITextExtractor):
    """Extracts the text layer of a PDF document."""

    def extract(self, file_bytes: bytes) -> str:
        try:
            doc = fitz.open(stream=file_bytes, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            logger.warning(
                "pdf_open_failed",
                size_bytes=len(file_bytes),
                error_type=type(exc).__name__,
            )
            raise InvalidInputError(message="File is not a readable PDF") from exc

        pages: list[str] = []
        try:
            for page in doc:
                text = page.get_text("text").strip()
                if text:
                    pages.append(text)
        finally:
            doc.close()

        if not pages:
            logger.warning("pdf_no_text_extracted", size_bytes=len(file_bytes))
        else:
            logger.info("pdf_extracted", pages=len(pages))
        return "\n\n".join(pages)

    def supported_types(self) -> tuple[str, ...]:
        return (".pdf",)
