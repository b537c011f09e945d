"""Unit tests for the PDF reader and its text formatter."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from langchain_core.documents import Document

from pdf_vector_loader.errors import DocumentReadError
from pdf_vector_loader.ingestion.loader import PdfReaderConfig, TextFormatter, extract_pages


def _raw_pages(path: Path, texts: list[str]) -> list[Document]:
    """What ``PyPDFLoader`` yields: one document per page, 0-based ``page``."""
    return [
        Document(page_content=text, metadata={"source": str(path), "page": i})
        for i, text in enumerate(texts)
    ]


@pytest.fixture()
def pdf_path(tmp_path: Path) -> Path:
    path = tmp_path / "spring-web-reference.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return path


def _extract(path: Path, texts: list[str], config: PdfReaderConfig | None = None) -> list[Document]:
    with patch("pdf_vector_loader.ingestion.loader.PyPDFLoader") as loader_cls:
        loader_cls.return_value.lazy_load.return_value = iter(_raw_pages(path, texts))
        return extract_pages(path, config)


# ── TextFormatter ──────────────────────────────────────────────────────


class TestTextFormatter:
    def test_defaults_leave_text_untouched(self) -> None:
        text = "Header\n  body line\nFooter"
        assert TextFormatter().format(text) == text

    def test_deletes_top_and_bottom_lines(self) -> None:
        fmt = TextFormatter(top_text_lines_to_delete=1, bottom_text_lines_to_delete=1)
        assert fmt.format("Header\nbody\nmore body\nFooter") == "body\nmore body"

    def test_skipped_pages_keep_their_lines(self) -> None:
        fmt = TextFormatter(top_pages_to_skip_before_delete=2, top_text_lines_to_delete=1)
        assert fmt.format("Title\nIntro", page_index=1) == "Title\nIntro"
        assert fmt.format("Header\nBody", page_index=2) == "Body"

    def test_deleting_more_lines_than_exist_gives_empty_text(self) -> None:
        fmt = TextFormatter(top_text_lines_to_delete=2, bottom_text_lines_to_delete=2)
        assert fmt.format("one\ntwo\nthree") == ""

    def test_left_alignment(self) -> None:
        assert TextFormatter(left_alignment=True).format("  a\n\tb") == "a\nb"


# ── extract_pages ──────────────────────────────────────────────────────


class TestExtractPages:
    def test_one_document_per_page(self, pdf_path: Path) -> None:
        pages = _extract(pdf_path, ["first page", "second page", "third page"])

        assert [p.page_content for p in pages] == ["first page", "second page", "third page"]
        assert [p.metadata["page_number"] for p in pages] == [1, 2, 3]
        assert all(p.metadata["file_name"] == "spring-web-reference.pdf" for p in pages)
        assert all(p.metadata["source"] == str(pdf_path) for p in pages)
        assert all("end_page_number" not in p.metadata for p in pages)

    def test_blank_pages_are_dropped(self, pdf_path: Path) -> None:
        pages = _extract(pdf_path, ["first", "   \n ", "third"])
        assert [p.metadata["page_number"] for p in pages] == [1, 3]

    def test_pages_per_document_merges_groups(self, pdf_path: Path) -> None:
        config = PdfReaderConfig(pages_per_document=2)
        pages = _extract(pdf_path, ["a", "b", "c"], config)

        assert len(pages) == 2
        assert pages[0].page_content == "a\nb"
        assert pages[0].metadata["page_number"] == 1
        assert pages[0].metadata["end_page_number"] == 2
        assert pages[1].page_content == "c"
        assert "end_page_number" not in pages[1].metadata

    def test_zero_pages_per_document_merges_whole_file(self, pdf_path: Path) -> None:
        pages = _extract(pdf_path, ["a", "b", "c"], PdfReaderConfig(pages_per_document=0))
        assert len(pages) == 1
        assert pages[0].page_content == "a\nb\nc"
        assert pages[0].metadata["end_page_number"] == 3

    def test_formatter_is_applied(self, pdf_path: Path) -> None:
        config = PdfReaderConfig(text_formatter=TextFormatter(bottom_text_lines_to_delete=1))
        pages = _extract(pdf_path, ["body\npage 1 of 2", "more\npage 2 of 2"], config)
        assert [p.page_content for p in pages] == ["body", "more"]

    def test_empty_pdf_gives_no_pages(self, pdf_path: Path) -> None:
        assert _extract(pdf_path, []) == []

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentReadError, match="not found"):
            extract_pages(tmp_path / "absent.pdf")

    def test_malformed_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf")
        with pytest.raises(DocumentReadError) as excinfo:
            extract_pages(path)
        assert excinfo.value.path == path
