"""
Ingestion — PDF reading, chunking, and the idempotent startup pipeline.

This package turns configured PDF files into embedded chunks stored in a
vector database, skipping files whose chunks are already present.
"""
