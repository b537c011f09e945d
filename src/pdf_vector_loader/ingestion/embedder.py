"""Embedding model shared by the vector-store backends."""

from __future__ import annotations

from langchain_huggingface import HuggingFaceEmbeddings

from pdf_vector_loader.config import settings


def get_embedding_function(model_name: str | None = None) -> HuggingFaceEmbeddings:
    """Return the configured sentence-transformer embedding function."""
    return HuggingFaceEmbeddings(model_name=model_name or settings.embedding_model)
