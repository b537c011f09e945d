"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import chromadb
from chromadb.errors import ChromaError

from pdf_vector_loader.config import settings
from pdf_vector_loader.errors import StoreAccessError
from pdf_vector_loader.store.base import VectorStoreBase

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)

_SCAN_PAGE_SIZE = 5000


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, str | int | float | bool]:
    """Keep only the scalar values Chroma accepts as metadata."""
    return {k: v for k, v in metadata.items() if isinstance(v, (str, int, float, bool))}


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    embeddings:
        LangChain embedding function; the configured sentence-transformer
        model is loaded when omitted.
    batch_size:
        Maximum records per upsert call.
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        embeddings: Embeddings | None = None,
        batch_size: int = settings.insert_batch_size,
    ) -> None:
        super().__init__(collection_name)
        self._batch_size = batch_size
        with self._translate_errors():
            self._client = chromadb.HttpClient(host=host, port=port)
            self._collection = self._client.get_or_create_collection(collection_name)
        if embeddings is None:
            from pdf_vector_loader.ingestion.embedder import get_embedding_function

            embeddings = get_embedding_function()
        self._embeddings = embeddings

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        try:
            yield
        except (ChromaError, ConnectionError, ValueError) as exc:
            raise StoreAccessError(f"Chroma collection {self.collection_name!r}: {exc}") from exc

    # -- VectorStoreBase overrides --------------------------------------------

    def add_documents(self, documents: list[Document]) -> list[str]:
        if not documents:
            return []

        ids: list[str] = []
        for start in range(0, len(documents), self._batch_size):
            batch = documents[start:start + self._batch_size]
            batch_ids = [str(uuid.uuid4()) for _ in batch]
            texts = [doc.page_content for doc in batch]
            vectors = self._embeddings.embed_documents(texts)
            with self._translate_errors():
                self._collection.upsert(
                    ids=batch_ids,
                    embeddings=vectors,
                    documents=texts,
                    metadatas=[_flatten_metadata(doc.metadata) for doc in batch],
                )
            ids.extend(batch_ids)
            logger.debug("  upserted batch %d-%d", start, start + len(batch))
        return ids

    def count(self) -> int:
        with self._translate_errors():
            return self._collection.count()

    def distinct_metadata_values(self, field: str) -> set[str]:
        values: set[str] = set()
        offset = 0
        while True:
            with self._translate_errors():
                page = self._collection.get(include=["metadatas"], limit=_SCAN_PAGE_SIZE, offset=offset)
            metadatas = page.get("metadatas") or []
            for meta in metadatas:
                value = (meta or {}).get(field)
                if value is not None:
                    values.add(str(value))
            if len(metadatas) < _SCAN_PAGE_SIZE:
                return values
            offset += _SCAN_PAGE_SIZE

    def health_check(self) -> bool:
        try:
            with self._translate_errors():
                self._client.heartbeat()
            return True
        except StoreAccessError:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    def delete(self, ids: list[str]) -> None:
        with self._translate_errors():
            self._collection.delete(ids=ids)
