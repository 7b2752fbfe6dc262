"""
Logging for feargreed.

Modules log through ``get_logger(__name__)``; the package logger gets a
NullHandler on import, so nothing is printed until an application calls
``configure_logging()``. The standalone app (feargreed.sentiment_app) does;
a NiceGUI application embedding SentimentDashboardController can instead
rely on its own handlers for the ``feargreed`` logger.

What gets logged, by level:

- INFO: dataset load start and finish (rows read, valid records), the number
  of malformed rows dropped, records ignored for an unrecognized
  classification, every selection transition (``Fear -> idle on
  BackgroundClicked``) and figure generation per view.
- DEBUG: per-category group counts after aggregation, trace counts per figure.
- WARNING: config keys or values that were ignored, click payloads that did
  not map to a category, the distribution tab being disabled.
- ERROR / exception: dataset load failures shown on the error card, failed
  re-renders of the distribution plot.

Set ``FEARGREED_LOG_LEVEL=DEBUG`` to see everything:

    ```python
    from feargreed.utils.logging import configure_logging
    configure_logging()  # level from FEARGREED_LOG_LEVEL, else INFO
    ```
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "feargreed"
LOG_LEVEL_ENV = "FEARGREED_LOG_LEVEL"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    """Level from argument, else FEARGREED_LOG_LEVEL, else INFO. Unknown names map to INFO."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def _stderr_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for h in logger.handlers:
        if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
            return h
    return None


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """Send feargreed log records to stderr. The root logger is left alone.

    Args:
        level: Level name or number. Defaults to FEARGREED_LOG_LEVEL, else INFO.
        fmt: Record format, DEFAULT_FMT if None.
        datefmt: Date format, DEFAULT_DATEFMT if None.
        force: Drop existing handlers on the feargreed logger first. Without
            it a second call only updates the level.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(resolved)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        existing = _stderr_handler(logger)
        if existing is not None:
            existing.setLevel(resolved)
            return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module (``get_logger(__name__)``); the feargreed logger if name is None."""
    return logging.getLogger(name or ROOT_LOGGER_NAME)
