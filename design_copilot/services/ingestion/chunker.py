"""Text chunking with overlapping word windows.

Splits extracted document text into windows of ``chunk_size`` words.  Each
window starts ``chunk_size - overlap`` words after the previous one, so
consecutive chunks share ``overlap`` words.  The overlap keeps a sentence
that straddles a window boundary retrievable from at least one chunk.

Example with ``chunk_size=4, overlap=1``::

    "The quick brown fox jumps over the lazy dog"
    -> ["The quick brown fox", "fox jumps over the", "the lazy dog"]

Whitespace is normalised: tokens are joined back with single spaces.
"""

from __future__ import annotations

import structlog

from design_copilot.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


def chunk_text(text: str, chunk_size: int, overlap: int) -> list[str]:
    """Split *text* into overlapping word windows.

    Parameters
    ----------
    text:
        Raw extracted text.
    chunk_size:
        Words per window, at least 1.
    overlap:
        Words shared by consecutive windows, ``0 <= overlap < chunk_size``.

    Returns
    -------
    list[str]
        Windows in document order.  Empty or whitespace-only text returns
        an empty list; text shorter than *chunk_size* returns one chunk.

    Raises
    ------
    ConfigurationError
        If the parameters would make the window stall or run backwards.
    """
    _validate(chunk_size, overlap)

    words = text.split()
    if not words:
        return []

    step = chunk_size - overlap
    chunks: list[str] = []
    start = 0
    while start < len(words):
        end = start + chunk_size
        chunks.append(" ".join(words[start:end]))
        # Stop once a window has consumed the final token; a further window
        # would hold nothing but overlap.
        if end >= len(words):
            break
        start += step
    return chunks


def _validate(chunk_size: int, overlap: int) -> None:
    if chunk_size < 1:
        raise ConfigurationError(f"chunk_size must be >= 1, got {chunk_size}")
    if overlap < 0:
        raise ConfigurationError(f"overlap must be >= 0, got {overlap}")
    if overlap >= chunk_size:
        raise ConfigurationError(
            f"overlap ({overlap}) must be less than chunk_size ({chunk_size})"
        )


class TextChunker:
    """Word-window chunker bound to one ``chunk_size`` / ``overlap`` pair.

    Parameters are validated on construction so a misconfigured deployment
    fails at startup, not on the first upload.

    Parameters
    ----------
    chunk_size:
        Words per chunk (default 800).
    overlap:
        Words of overlap between consecutive chunks (default 100).
    """

    def __init__(self, chunk_size: int = 800, overlap: int = 100) -> None:
        _validate(chunk_size, overlap)
        self._chunk_size = chunk_size
        self._overlap = overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    def chunk(self, text: str) -> list[str]:
        """Split *text* into overlapping windows. See :func:`chunk_text`."""
        chunks = chunk_text(text, self._chunk_size, self._overlap)
        logger.debug(
            "chunking_complete",
            num_chunks=len(chunks),
            chunk_size=self._chunk_size,
            overlap=self._overlap,
        )
        return chunks
