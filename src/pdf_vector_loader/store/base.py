"""Abstract base class for vector-store backends.

Adding a new backend only requires subclassing :class:`VectorStoreBase`
and implementing the abstract methods. The ingestion pipeline and its
gate are backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from langchain_core.documents import Document


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the table / collection holding the chunks.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add_documents(self, documents: list[Document]) -> list[str]:
        """Embed and persist *documents*; return the ids of the new rows.

        No transactional guarantee is given across the batch.
        """
        ...

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored chunks."""
        ...

    @abstractmethod
    def distinct_metadata_values(self, field: str) -> set[str]:
        """Return every distinct non-null value of metadata *field*."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def delete(self, ids: list[str]) -> None:
        """Delete chunks by their IDs.  Optional — raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support delete")
