"""Idempotency check: has a source file already been ingested?"""

from __future__ import annotations

from pdf_vector_loader.store.base import VectorStoreBase

FILE_NAME_KEY = "file_name"


class IngestionGate:
    """Answers whether chunks of a given file already exist in *store*.

    A file counts as ingested as soon as one stored chunk carries its
    name, even if an earlier run stopped half-way through it.
    """

    def __init__(self, store: VectorStoreBase) -> None:
        self._store = store

    def ingested_file_names(self) -> set[str]:
        """Distinct ``file_name`` values across all stored chunks."""
        return self._store.distinct_metadata_values(FILE_NAME_KEY)

    def already_ingested(self, file_name: str) -> bool:
        return file_name in self.ingested_file_names()
