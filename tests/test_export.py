"""Tests for the static HTML snapshot exporter."""

from __future__ import annotations

import pytest

from biblioart_mcp.export import (
    FALLBACK_BACKGROUND,
    _safe_color,
    export_filename,
    export_html,
    write_export,
)
from biblioart_mcp.models.document import Document
from tests.conftest import sample_wire


def _doc(mutate=None) -> Document:
    wire = sample_wire()
    if mutate:
        mutate(wire)
    return Document.model_validate(wire)


class TestExportHtml:
    def test_same_document_same_bytes(self, sample_document):
        assert export_html(sample_document) == export_html(sample_document)

    def test_self_contained(self, sample_document):
        page = export_html(sample_document)
        assert page.startswith("<!DOCTYPE html>")
        assert "<script src" not in page
        assert "<link" not in page
        assert "IntersectionObserver" in page

    def test_header_and_sections(self, sample_document):
        page = export_html(sample_document)
        assert "<title>The Test Book - Visual Journey</title>" in page
        assert "A. Writer" in page
        assert page.count('<section class="scene"') == 3
        assert 'lang="en-US"' in page

    def test_emphasis_uses_scene_accent(self, sample_document):
        page = export_html(sample_document)
        assert '<span style="color:#ffd700;font-weight:bold">storm</span>' in page

    def test_layout_presentations(self, sample_document):
        page = export_html(sample_document)
        assert '<div class="storm">' in page
        assert '<div class="constellation">' in page
        assert page.count('<div class="card">') == 2
        assert '<div class="split">' in page

    def test_constellation_without_items_uses_default(self):
        def strip_items(wire):
            del wire["screenplay"][1]["visual"]["galleryItems"]
        page = export_html(_doc(strip_items))
        assert '<div class="constellation">' not in page
        assert page.count('<div class="split">') == 2

    def test_text_is_escaped(self):
        def inject(wire):
            wire["meta"]["title"] = "<script>alert(1)</script>"
            wire["screenplay"][0]["paragraphs"] = ['Tom & "Jerry" *<b>bold</b>*']
        page = export_html(_doc(inject))
        assert "<script>alert(1)</script>" not in page
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in page
        assert "Tom &amp; &quot;Jerry&quot;" in page
        assert "&lt;b&gt;bold&lt;/b&gt;</span>" in page

    def test_unsafe_palette_values_are_replaced(self):
        def inject(wire):
            wire["screenplay"][0]["visual"]["palette"]["background"] = 'red;"><script>x()</script>'
        page = export_html(_doc(inject))
        assert "x()" not in page
        assert f"background-color:{FALLBACK_BACKGROUND}" in page

    def test_lang_is_sanitized(self):
        def inject(wire):
            wire["meta"]["language"] = 'en" onload="x'
        assert '<html lang="en">' in export_html(_doc(inject))


class TestSafeColor:
    @pytest.mark.parametrize("value", ["#fff", "#ff0055", "#ff005580", "rgb(1, 2, 3)", "hsla(10, 50%, 50%, .5)", "teal"])
    def test_accepted(self, value):
        assert _safe_color(value, "#000") == value

    @pytest.mark.parametrize("value", ["", "#ggg", "url(evil)", "red; color: blue", "expression(alert(1))"])
    def test_rejected(self, value):
        assert _safe_color(value, "#000") == "#000"


class TestFilename:
    @pytest.mark.parametrize("title, expected", [
        ("The Hobbit", "the_hobbit_biblioart.html"),
        ("Dune: Part 1", "dune__part_1_biblioart.html"),
        ("Café", "caf__biblioart.html"),
        ("", "untitled_biblioart.html"),
    ])
    def test_export_filename(self, title, expected):
        assert export_filename(title) == expected

    def test_write_export_creates_directory(self, tmp_path, sample_document):
        target = write_export(sample_document, tmp_path / "out" / "nested")
        assert target.name == "the_test_book_biblioart.html"
        assert target.read_text(encoding="utf-8") == export_html(sample_document)
