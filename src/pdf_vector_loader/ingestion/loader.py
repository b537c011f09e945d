"""PDF reader — page-level extraction on top of LangChain's ``PyPDFLoader``."""

from __future__ import annotations

import logging
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader
from langchain_core.documents import Document
from pydantic import BaseModel, Field
from pypdf.errors import PyPdfError

from pdf_vector_loader.errors import DocumentReadError

logger = logging.getLogger(__name__)


class TextFormatter(BaseModel):
    """Cleanup applied to the raw text of every extracted page.

    Attributes
    ----------
    top_pages_to_skip_before_delete:
        Leading pages left untouched by line deletion (cover, TOC …).
    top_text_lines_to_delete / bottom_text_lines_to_delete:
        Lines stripped from the top / bottom of each remaining page,
        typically running headers and footers.
    left_alignment:
        Strip leading whitespace from every line.
    """

    top_pages_to_skip_before_delete: int = Field(default=0, ge=0)
    top_text_lines_to_delete: int = Field(default=0, ge=0)
    bottom_text_lines_to_delete: int = Field(default=0, ge=0)
    left_alignment: bool = False

    def format(self, text: str, page_index: int = 0) -> str:
        """Return *text* cleaned for the page at 0-based *page_index*."""
        lines = text.splitlines()
        if page_index >= self.top_pages_to_skip_before_delete:
            end = len(lines) - self.bottom_text_lines_to_delete
            lines = lines[self.top_text_lines_to_delete:max(end, 0)]
        if self.left_alignment:
            lines = [line.lstrip() for line in lines]
        return "\n".join(lines)


class PdfReaderConfig(BaseModel):
    """How pages are grouped and cleaned.

    ``pages_per_document=0`` merges the whole file into a single unit.
    """

    pages_per_document: int = Field(default=1, ge=0)
    text_formatter: TextFormatter = Field(default_factory=TextFormatter)


def _unit_metadata(path: Path, first_page: int, last_page: int) -> dict:
    metadata = {
        "file_name": path.name,
        "source": str(path),
        "page_number": first_page,
    }
    if last_page != first_page:
        metadata["end_page_number"] = last_page
    return metadata


def extract_pages(path: str | Path, config: PdfReaderConfig | None = None) -> list[Document]:
    """Read *path* and return one ``Document`` per page group.

    Parameters
    ----------
    path:
        PDF file on disk.
    config:
        Grouping and cleanup options; defaults keep one untouched page
        per document.

    Returns
    -------
    list[Document]
        Page units in page order, carrying ``file_name``, ``source`` and
        1-based ``page_number`` metadata. Blank pages are dropped.

    Raises
    ------
    DocumentReadError
        When the file is missing, unreadable or not a valid PDF.
    """
    path = Path(path)
    config = config or PdfReaderConfig()

    if not path.is_file():
        raise DocumentReadError(path, "file not found")

    try:
        raw_pages = list(PyPDFLoader(str(path)).lazy_load())
    except (OSError, ValueError, PyPdfError) as exc:
        raise DocumentReadError(path, str(exc)) from exc

    # (1-based page number, cleaned text) for every non-blank page
    pages: list[tuple[int, str]] = []
    for index, raw in enumerate(raw_pages):
        page_index = raw.metadata.get("page", index)
        text = config.text_formatter.format(raw.page_content, page_index)
        if text.strip():
            pages.append((page_index + 1, text))

    group = config.pages_per_document or max(len(pages), 1)
    units: list[Document] = []
    for start in range(0, len(pages), group):
        batch = pages[start:start + group]
        units.append(
            Document(
                page_content="\n".join(text for _, text in batch),
                metadata=_unit_metadata(path, batch[0][0], batch[-1][0]),
            )
        )

    logger.debug("Read %d pages (%d units) from %s", len(raw_pages), len(units), path)
    return units
