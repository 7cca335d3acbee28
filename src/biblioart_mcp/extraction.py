"""Source-text extraction -- PDF (pypdf) or plain text, capped in pages and characters."""

from __future__ import annotations

import logging
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .errors import SourceExtractionError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".txt", ".md")


def resolve_path(path_value: str) -> Path:
    """Resolve a user-supplied path to an absolute filesystem path."""
    return Path(path_value).expanduser().resolve()


def _pdf_text(path: Path, max_pages: int) -> str:
    try:
        reader = PdfReader(path)
        if reader.is_encrypted and not reader.decrypt(""):
            raise SourceExtractionError(f"Encrypted PDF: {path.name}")
        count = min(len(reader.pages), max_pages)
        texts = [reader.pages[i].extract_text() or "" for i in range(count)]
    except (PyPdfError, OSError, ValueError) as exc:
        raise SourceExtractionError(f"Unreadable PDF {path.name}: {exc}") from exc
    logger.info("Extracted %d of %d page(s) from %s", len(texts), len(reader.pages), path.name)
    return "\n\n".join(texts)


def extract_text(path_value: str, *, max_pages: int = 50, max_chars: int = 250_000) -> str:
    """Extract the text of a book file.

    Args:
        path_value: Path to a .pdf, .txt or .md file.
        max_pages: PDF pages read, from the start.
        max_chars: Characters kept, from the start.

    Returns:
        Extracted text, at most *max_chars* long.

    Raises:
        SourceExtractionError: Unsupported format, missing file, or nothing readable.
    """
    path = resolve_path(path_value)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        allowed = ", ".join(SUPPORTED_EXTENSIONS)
        raise SourceExtractionError(
            f"Unsupported source extension '{suffix}'. Supported: {allowed}", unsupported=True,
        )
    if not path.is_file():
        raise SourceExtractionError(f"File not found: {path_value}")

    if suffix == ".pdf":
        text = _pdf_text(path, max_pages)
    else:
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise SourceExtractionError(f"Unreadable file {path.name}: {exc}") from exc

    if not text.strip():
        raise SourceExtractionError(f"No extractable text in {path.name}")
    return text[:max_chars]
