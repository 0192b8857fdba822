"""Observability utilities: logging setup.

Log records go to stderr; stdout is reserved for the JSON-lines event stream
written by the CLI. If `structlog` is installed it is configured with the same
level, otherwise only standard logging is used.
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: str = "INFO", stream: Optional[IO[str]] = None) -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str
        Logging level name (e.g., "DEBUG", "INFO"). Unknown names fall back
        to INFO.
    stream: IO[str], optional
        Destination for log records; stderr when not given.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=stream or sys.stderr,
    )

    try:  # optional structlog
        structlog = importlib.import_module("structlog")
    except ModuleNotFoundError:  # pragma: no cover
        return
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
    )
