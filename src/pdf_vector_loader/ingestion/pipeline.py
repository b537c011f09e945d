"""
Startup ingestion of the configured PDF files.

For every configured file the pipeline asks the :class:`IngestionGate`
whether the store already holds chunks for it; if not, the file is read,
split and written to the store. Each file is checked on its own, so a
run ingests exactly the files that are missing.

Nothing happens on construction; the entry point calls
:meth:`IngestionPipeline.initialize` once after wiring.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from pdf_vector_loader.config import Settings
from pdf_vector_loader.config import settings as default_settings
from pdf_vector_loader.ingestion.chunker import split_pages
from pdf_vector_loader.ingestion.gate import IngestionGate
from pdf_vector_loader.ingestion.loader import PdfReaderConfig, TextFormatter, extract_pages
from pdf_vector_loader.store.base import VectorStoreBase

logger = logging.getLogger(__name__)


class DocumentState(str, enum.Enum):
    PENDING = "pending"
    INGESTED = "ingested"
    SKIPPED = "skipped"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class IngestionReport:
    """Outcome of one :meth:`IngestionPipeline.initialize` run."""

    documents_found: int = 0
    row_count_before: int = 0
    chunks_created: int = 0
    states: dict[str, DocumentState] = field(default_factory=dict)
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None

    @property
    def ingested(self) -> list[str]:
        return [name for name, state in self.states.items() if state is DocumentState.INGESTED]

    @property
    def skipped(self) -> list[str]:
        return [name for name, state in self.states.items() if state is DocumentState.SKIPPED]

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict:
        return {
            "documents_found": self.documents_found,
            "row_count_before": self.row_count_before,
            "ingested": self.ingested,
            "skipped": self.skipped,
            "chunks_created": self.chunks_created,
            "duration_seconds": self.duration_seconds,
        }


class IngestionPipeline:
    """Reader → splitter → store, gated per file.

    Parameters
    ----------
    store:
        Destination backend, also queried by the gate.
    documents:
        PDF files to ingest; defaults to ``settings.documents``. A file
        whose name matches an earlier entry is ignored.
    settings:
        Reader and splitter options.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        documents: list[str | Path] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._store = store
        self._gate = IngestionGate(store)
        self.documents: list[Path] = []
        for p in documents if documents is not None else self._settings.documents:
            path = Path(p)
            if any(seen.name == path.name for seen in self.documents):
                logger.warning("Ignoring %s: a file named %s is already listed", path, path.name)
                continue
            self.documents.append(path)
        self.reader_config = PdfReaderConfig(
            pages_per_document=self._settings.pages_per_document,
            text_formatter=TextFormatter(
                top_pages_to_skip_before_delete=self._settings.top_pages_to_skip_before_delete,
                top_text_lines_to_delete=self._settings.top_text_lines_to_delete,
                bottom_text_lines_to_delete=self._settings.bottom_text_lines_to_delete,
            ),
        )

    def initialize(self) -> IngestionReport:
        """Ingest every configured file that the store does not hold yet.

        Reader and store errors propagate; files processed before the
        failure stay ingested.
        """
        logger.info("Loading all PDF resources...")
        report = IngestionReport(documents_found=len(self.documents))
        report.states = {path.name: DocumentState.PENDING for path in self.documents}
        report.row_count_before = self._store.count()

        for path in self.documents:
            if self._gate.already_ingested(path.name):
                logger.info(
                    "Vector store already has data for %s (%d entries in total), skipping load.",
                    path.name,
                    report.row_count_before,
                )
                report.states[path.name] = DocumentState.SKIPPED
                continue
            report.chunks_created += self.process_and_save(path)
            report.states[path.name] = DocumentState.INGESTED

        report.completed_at = _utcnow()
        logger.info(
            "Ingestion complete: %d ingested, %d skipped, %d chunks in %.1fs",
            len(report.ingested),
            len(report.skipped),
            report.chunks_created,
            report.duration_seconds,
        )
        return report

    def process_and_save(self, path: str | Path) -> int:
        """Read, split and store one file; return the number of chunks written."""
        path = Path(path)
        logger.info("Vector store is missing data for this resource, loading data for resource %s...", path.name)

        pages = extract_pages(path, self.reader_config)
        logger.info("Extracted %d pages from resource %s", len(pages), path.name)

        chunks = split_pages(
            pages,
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
            encoding_name=self._settings.token_encoding,
            max_workers=self._settings.split_max_workers,
        )
        logger.info("Split into %d chunks", len(chunks))

        if not chunks:
            logger.warning("Resource %s has no extractable text; nothing stored, it will be read again next run", path.name)
            return 0

        self._store.add_documents(chunks)
        logger.info("Resource %s loaded", path.name)
        return len(chunks)
