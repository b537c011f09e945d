"""Exception hierarchy for the ingestion job.

Every error raised here is fatal: the job aborts and nothing is retried.
"""

from __future__ import annotations


class PdfVectorLoaderError(Exception):
    """Base class for all ingestion failures."""


class DocumentReadError(PdfVectorLoaderError):
    """A source PDF is missing, unreadable or malformed."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class StoreAccessError(PdfVectorLoaderError):
    """The vector store is unreachable or a query against it failed."""
