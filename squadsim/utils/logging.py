"""Logging configuration for CLI and server runs."""

from __future__ import annotations

import logging
import sys
from typing import Iterable


def setup_logging(level: str = "INFO", quiet: Iterable[str] = ()) -> None:
    """Route all records to stdout with a compact, aligned format.

    Loggers named in *quiet* are held at WARNING unless *level* is DEBUG;
    batch runs use this to drop the per-battle start/end lines.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)-5s] %(name)-28s | %(message)s",
        datefmt="%H:%M:%S",
    ))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.NOTSET if numeric_level <= logging.DEBUG else logging.WARNING)
