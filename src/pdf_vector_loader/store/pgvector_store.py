"""PostgreSQL + pgvector implementation of the vector-store abstraction.

Rows live in a single table shaped like::

    id        uuid PRIMARY KEY
    content   text
    metadata  json
    embedding vector(<dimensions>)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import psycopg
from psycopg import sql
from psycopg.types.json import Json

from pdf_vector_loader.config import settings
from pdf_vector_loader.errors import StoreAccessError
from pdf_vector_loader.store.base import VectorStoreBase

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


def _vector_literal(embedding: list[float]) -> str:
    """Render *embedding* in pgvector's text input format."""
    return "[" + ",".join(repr(float(x)) for x in embedding) + "]"


class PgVectorStore(VectorStoreBase):
    """pgvector-backed vector store.

    Parameters
    ----------
    table:
        Name of the table holding the chunks.
    dsn:
        libpq connection string.
    embeddings:
        LangChain embedding function; the configured sentence-transformer
        model is loaded when omitted.
    dimensions:
        Embedding width, used when creating the table.
    initialize_schema:
        Create the extension, table and index if they do not exist.
    batch_size:
        Maximum rows embedded and inserted per statement batch.
    """

    def __init__(
        self,
        table: str = settings.pg_table,
        *,
        dsn: str = settings.pg_dsn,
        embeddings: Embeddings | None = None,
        dimensions: int = settings.embedding_dimensions,
        initialize_schema: bool = settings.pg_initialize_schema,
        batch_size: int = settings.insert_batch_size,
    ) -> None:
        super().__init__(table)
        self._dsn = dsn
        self._dimensions = dimensions
        self._batch_size = batch_size
        if embeddings is None:
            from pdf_vector_loader.ingestion.embedder import get_embedding_function

            embeddings = get_embedding_function()
        self._embeddings = embeddings
        if initialize_schema:
            self.initialize_schema()

    @contextmanager
    def _cursor(self) -> Iterator[psycopg.Cursor]:
        """Yield a cursor on a fresh connection, committed on clean exit."""
        try:
            with psycopg.connect(self._dsn) as conn:
                with conn.cursor() as cur:
                    yield cur
        except psycopg.Error as exc:
            raise StoreAccessError(f"pgvector table {self.collection_name!r}: {exc}") from exc

    def initialize_schema(self) -> None:
        table = sql.Identifier(self.collection_name)
        with self._cursor() as cur:
            cur.execute("CREATE EXTENSION IF NOT EXISTS vector")
            cur.execute(
                sql.SQL(
                    "CREATE TABLE IF NOT EXISTS {} ("
                    "id uuid DEFAULT gen_random_uuid() PRIMARY KEY, "
                    "content text, "
                    "metadata json, "
                    "embedding vector({}))"
                ).format(table, sql.Literal(self._dimensions))
            )
            cur.execute(
                sql.SQL("CREATE INDEX IF NOT EXISTS {} ON {} USING hnsw (embedding vector_cosine_ops)").format(
                    sql.Identifier(f"{self.collection_name}_embedding_idx"), table
                )
            )
        logger.info("Ensured pgvector table %s (dimensions=%d)", self.collection_name, self._dimensions)

    # -- VectorStoreBase overrides --------------------------------------------

    def add_documents(self, documents: list[Document]) -> list[str]:
        if not documents:
            return []

        insert = sql.SQL(
            "INSERT INTO {} (id, content, metadata, embedding) VALUES (%s, %s, %s, %s::vector)"
        ).format(sql.Identifier(self.collection_name))

        ids: list[str] = []
        for start in range(0, len(documents), self._batch_size):
            batch = documents[start:start + self._batch_size]
            vectors = self._embeddings.embed_documents([doc.page_content for doc in batch])
            rows = []
            for doc, vector in zip(batch, vectors):
                row_id = uuid.uuid4()
                ids.append(str(row_id))
                rows.append((row_id, doc.page_content, Json(doc.metadata), _vector_literal(vector)))
            with self._cursor() as cur:
                cur.executemany(insert, rows)
            logger.debug("  inserted batch %d-%d", start, start + len(batch))
        return ids

    def count(self) -> int:
        with self._cursor() as cur:
            cur.execute(sql.SQL("SELECT COUNT(*) FROM {}").format(sql.Identifier(self.collection_name)))
            row = cur.fetchone()
        return int(row[0]) if row else 0

    def distinct_metadata_values(self, field: str) -> set[str]:
        query = sql.SQL("SELECT DISTINCT metadata->>%s AS value FROM {}").format(
            sql.Identifier(self.collection_name)
        )
        with self._cursor() as cur:
            cur.execute(query, (field,))
            rows = cur.fetchall()
        return {row[0] for row in rows if row[0] is not None}

    def health_check(self) -> bool:
        try:
            with self._cursor() as cur:
                cur.execute("SELECT 1")
            return True
        except StoreAccessError:
            logger.warning("pgvector health-check failed", exc_info=True)
            return False

    def delete(self, ids: list[str]) -> None:
        if not ids:
            return
        with self._cursor() as cur:
            cur.execute(
                sql.SQL("DELETE FROM {} WHERE id = ANY(%s::uuid[])").format(sql.Identifier(self.collection_name)),
                (list(ids),),
            )
