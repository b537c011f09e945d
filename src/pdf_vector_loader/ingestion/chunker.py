"""Token-bounded text chunking."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from typing import TYPE_CHECKING

from langchain_text_splitters import TokenTextSplitter

if TYPE_CHECKING:
    from langchain_core.documents import Document


def split_pages(
    pages: list[Document],
    *,
    chunk_size: int = 800,
    chunk_overlap: int = 0,
    encoding_name: str = "cl100k_base",
    max_workers: int = 4,
) -> list[Document]:
    """Split every page unit into chunks of at most *chunk_size* tokens.

    Pages are split independently on a bounded thread pool; the call
    returns once every page is done. The order of the returned chunks
    across pages is not meaningful.

    Each token window is decoded on its own, so a multi-byte character
    cut by a window boundary comes back as U+FFFD in both neighbouring
    chunks. ASCII text survives concatenation unchanged.

    Parameters
    ----------
    pages:
        Page units produced by the PDF reader.
    chunk_size:
        Maximum number of tokens per chunk.
    chunk_overlap:
        Tokens shared by consecutive chunks of the same page.
    encoding_name:
        tiktoken encoding used to count tokens.
    max_workers:
        Upper bound on concurrent splitting threads.

    Returns
    -------
    list[Document]
        Chunks carrying their page's metadata.
    """
    if chunk_overlap >= chunk_size:
        raise ValueError(f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})")
    if not pages:
        return []

    splitter = TokenTextSplitter(
        encoding_name=encoding_name,
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
    )
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="split") as pool:
        per_page = pool.map(lambda page: splitter.split_documents([page]), pages)
        return list(chain.from_iterable(per_page))
