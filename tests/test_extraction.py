"""Tests for source-text extraction."""

from __future__ import annotations

import pytest
from pypdf import PdfWriter

from biblioart_mcp.errors import ErrorCategory, SourceExtractionError
from biblioart_mcp.extraction import extract_text


class TestExtractText:
    def test_plain_text(self, tmp_path):
        path = tmp_path / "book.txt"
        path.write_text("Chapter 1\n\nIt was a dark night.", encoding="utf-8")
        assert extract_text(str(path)) == "Chapter 1\n\nIt was a dark night."

    def test_markdown_with_uppercase_suffix(self, tmp_path):
        path = tmp_path / "BOOK.MD"
        path.write_text("# Title", encoding="utf-8")
        assert extract_text(str(path)) == "# Title"

    def test_truncated_to_max_chars(self, tmp_path):
        path = tmp_path / "book.txt"
        path.write_text("x" * 100, encoding="utf-8")
        assert len(extract_text(str(path), max_chars=10)) == 10

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "book.docx"
        path.write_bytes(b"PK")
        with pytest.raises(SourceExtractionError) as exc_info:
            extract_text(str(path))
        assert exc_info.value.category is ErrorCategory.SOURCE_UNSUPPORTED

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceExtractionError, match="not found") as exc_info:
            extract_text(str(tmp_path / "missing.pdf"))
        assert exc_info.value.category is ErrorCategory.SOURCE_UNREADABLE

    def test_whitespace_only_text(self, tmp_path):
        path = tmp_path / "blank.txt"
        path.write_text("   \n\n", encoding="utf-8")
        with pytest.raises(SourceExtractionError, match="No extractable text"):
            extract_text(str(path))

    def test_pdf_without_text(self, tmp_path):
        path = tmp_path / "scan.pdf"
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        with open(path, "wb") as fh:
            writer.write(fh)
        with pytest.raises(SourceExtractionError, match="No extractable text"):
            extract_text(str(path))

    def test_corrupt_pdf(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf at all")
        with pytest.raises(SourceExtractionError) as exc_info:
            extract_text(str(path))
        assert exc_info.value.category is ErrorCategory.SOURCE_UNREADABLE
