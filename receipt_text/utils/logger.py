"""Logging setup shared by the CLI, the API and the benchmark.

The parser core does not log; everything around it does, through
named loggers obtained from :func:`get_logger`.
"""

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Attach a single stream handler to the root logger.

    Calling it again once a handler exists is a no-op. Unknown level
    names fall back to INFO.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream, stdout by default.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    root.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, usually the caller's ``__name__``."""
    return logging.getLogger(name)
