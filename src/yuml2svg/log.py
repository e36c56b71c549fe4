"""Logging setup for the yuml2svg CLI."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LEVEL_ENV = "YUML2SVG_LOG_LEVEL"


def configure_logging(verbose: bool = False) -> int:
    """Configure the root logger and return the level in effect.

    ``verbose`` forces DEBUG. Otherwise the level is read from
    ``YUML2SVG_LOG_LEVEL`` (a level name such as ``warning``), falling back
    to INFO, which keeps directive warnings visible on stderr.
    """
    level = logging.DEBUG
    if not verbose:
        level = logging.getLevelName(os.environ.get(LEVEL_ENV, "INFO").strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    return level
