"""Logging for the cliffkin engine.

Every module logs through ``get_logger(__name__)``; records land under the
``cliffkin`` logger, which gets one stderr handler on first use. The level
and an optional append-only log file come from the environment:

    CLIFFKIN_LOG_LEVEL  DEBUG / INFO (default) / WARNING / ERROR
    CLIFFKIN_LOG_FILE   path of a log file, timestamps included
"""

import logging
import os
import sys
from typing import Optional

ROOT_NAME = "cliffkin"
LEVEL_ENV = "CLIFFKIN_LOG_LEVEL"
FILE_ENV = "CLIFFKIN_LOG_FILE"

_FORMAT = "%(levelname)s %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s " + _FORMAT

_configured = False


def configure(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """(Re)install the handlers of the ``cliffkin`` logger.

    Args:
        level: Level name; falls back to ``CLIFFKIN_LOG_LEVEL``, then INFO.
        log_file: Extra file sink; falls back to ``CLIFFKIN_LOG_FILE``.

    Returns:
        The ``cliffkin`` root logger.
    """
    global _configured
    _configured = True

    root = logging.getLogger(ROOT_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    level_name = (level or os.environ.get(LEVEL_ENV, "INFO")).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(console)

    log_file = log_file or os.environ.get(FILE_ENV)
    if log_file:
        sink = logging.FileHandler(log_file, mode="a")
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        root.addHandler(sink)
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger ``cliffkin.<name>``; configures the hierarchy on first call."""
    if not _configured:
        configure()
    return logging.getLogger(f"{ROOT_NAME}.{name}")
