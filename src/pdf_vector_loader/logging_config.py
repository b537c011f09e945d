"""Logging setup for the command-line entry point.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed once by :func:`setup_logging`.
"""

from __future__ import annotations

import logging
import sys

_NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "urllib3",
    "chromadb",
    "sentence_transformers",
    "pypdf",
)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging to stdout at *level*."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
