"""
Command-line entry point.

Usage:
    pdf-vector-loader [--backend pgvector|chroma] [--log-level LEVEL]
    pdf-vector-loader ingest [PDF ...] [--backend pgvector|chroma] [--log-level LEVEL]
    pdf-vector-loader status [--backend pgvector|chroma] [--log-level LEVEL]

With no command, ``ingest`` runs on the configured list. PDF paths are
only accepted after ``ingest``. Options may go before or after the
command.

``ingest`` wires the store and pipeline, then runs
:meth:`~pdf_vector_loader.ingestion.pipeline.IngestionPipeline.initialize`
exactly once.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pdf_vector_loader.config import settings
from pdf_vector_loader.errors import PdfVectorLoaderError
from pdf_vector_loader.ingestion.gate import IngestionGate
from pdf_vector_loader.ingestion.pipeline import IngestionPipeline
from pdf_vector_loader.logging_config import setup_logging
from pdf_vector_loader.store import build_store

logger = logging.getLogger(__name__)


def _common_options() -> argparse.ArgumentParser:
    # SUPPRESS keeps a subcommand from resetting a value given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--backend",
        choices=["pgvector", "chroma"],
        default=argparse.SUPPRESS,
        help=f"Vector store backend (default: {settings.vector_store_backend})",
    )
    common.add_argument(
        "--log-level",
        default=argparse.SUPPRESS,
        help=f"Log level (default: {settings.log_level})",
    )
    return common


def _build_parser() -> argparse.ArgumentParser:
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog="pdf-vector-loader",
        description="Load PDF files into a vector store, skipping files already present",
        parents=[common],
    )

    commands = parser.add_subparsers(dest="command")

    ingest = commands.add_parser("ingest", parents=[common], help="Ingest every configured PDF not yet stored")
    ingest.add_argument(
        "documents",
        nargs="*",
        help="PDF files to ingest instead of the configured list",
    )

    commands.add_parser("status", parents=[common], help="Show row count and ingested file names")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    setup_logging(getattr(args, "log_level", settings.log_level))

    run_settings = settings
    backend = getattr(args, "backend", None)
    if backend:
        run_settings = settings.model_copy(update={"vector_store_backend": backend})

    try:
        store = build_store(run_settings)
        if args.command == "status":
            result = {
                "rows": store.count(),
                "ingested": sorted(IngestionGate(store).ingested_file_names()),
            }
        else:
            documents = getattr(args, "documents", None) or None
            pipeline = IngestionPipeline(store, documents=documents, settings=run_settings)
            result = pipeline.initialize().to_dict()
    except PdfVectorLoaderError as exc:
        logger.error("Ingestion aborted: %s", exc)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
