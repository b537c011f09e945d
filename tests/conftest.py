"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import uuid
from typing import Any

import pytest
from langchain_core.documents import Document

from pdf_vector_loader.store.base import VectorStoreBase


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── In-memory vector store for deterministic testing ────────────────────


class FakeVectorStore(VectorStoreBase):
    """Keeps rows in a list; no embedding is computed."""

    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        super().__init__("test-collection")
        self.rows: list[dict[str, Any]] = rows or []
        self.add_calls = 0

    def add_documents(self, documents: list[Document]) -> list[str]:
        self.add_calls += 1
        ids = []
        for doc in documents:
            row_id = str(uuid.uuid4())
            self.rows.append({"id": row_id, "content": doc.page_content, "metadata": dict(doc.metadata)})
            ids.append(row_id)
        return ids

    def count(self) -> int:
        return len(self.rows)

    def distinct_metadata_values(self, field: str) -> set[str]:
        return {row["metadata"][field] for row in self.rows if row["metadata"].get(field) is not None}

    def health_check(self) -> bool:
        return True


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def web_loaded_store() -> FakeVectorStore:
    """Store that already holds one chunk of spring-web-reference.pdf."""
    return FakeVectorStore(
        rows=[
            {
                "id": "existing-1",
                "content": "Spring Web MVC is the original web framework.",
                "metadata": {"file_name": "spring-web-reference.pdf", "page_number": 1},
            }
        ]
    )
