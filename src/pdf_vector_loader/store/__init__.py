"""
Store — persistence of embedded chunks.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend.
- :class:`PgVectorStore` — default PostgreSQL/pgvector backend.
- :class:`ChromaVectorStore` — Chroma backend.
- :func:`build_store` — backend factory driven by the settings.
"""

from __future__ import annotations

from pdf_vector_loader.config import Settings
from pdf_vector_loader.config import settings as default_settings
from pdf_vector_loader.store.base import VectorStoreBase

__all__ = [
    "ChromaVectorStore",
    "PgVectorStore",
    "VectorStoreBase",
    "build_store",
]


def build_store(settings: Settings | None = None) -> VectorStoreBase:
    """Instantiate the backend named by ``settings.vector_store_backend``."""
    settings = settings or default_settings
    if settings.vector_store_backend not in ("chroma", "pgvector"):
        raise ValueError(f"Unsupported vector_store_backend={settings.vector_store_backend!r}")

    from pdf_vector_loader.ingestion.embedder import get_embedding_function

    embeddings = get_embedding_function(settings.embedding_model)
    if settings.vector_store_backend == "chroma":
        from pdf_vector_loader.store.chroma_store import ChromaVectorStore

        return ChromaVectorStore(
            settings.chroma_collection,
            host=settings.chroma_host,
            port=settings.chroma_port,
            embeddings=embeddings,
            batch_size=settings.insert_batch_size,
        )
    from pdf_vector_loader.store.pgvector_store import PgVectorStore

    return PgVectorStore(
        settings.pg_table,
        dsn=settings.pg_dsn,
        embeddings=embeddings,
        dimensions=settings.embedding_dimensions,
        initialize_schema=settings.pg_initialize_schema,
        batch_size=settings.insert_batch_size,
    )


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import backends to avoid pulling in their clients at import time."""
    if name == "ChromaVectorStore":
        from pdf_vector_loader.store.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    if name == "PgVectorStore":
        from pdf_vector_loader.store.pgvector_store import PgVectorStore

        return PgVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
