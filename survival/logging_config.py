"""
Frostbound - survival/logging_config.py
Logging setup for the command-line driver and anything embedding a session.
===========================================================================
Version:     0.1
Stack:       Python 3.11+ | logging
Status:      Stable.

The level comes from the caller, then FROSTBOUND_LOG_LEVEL, then INFO.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"
LEVEL_ENV_VAR = "FROSTBOUND_LOG_LEVEL"
PACKAGE_LOGGERS = ("survival", "world")


def configure_logging(level: Optional[str] = None, format: str = DEFAULT_FORMAT,
                      datefmt: str = DEFAULT_DATEFMT) -> str:
    """Configure root logging. Falls back to FROSTBOUND_LOG_LEVEL, then INFO.

    Returns the resolved level name.
    """
    raw_level = level if level is not None else os.getenv(LEVEL_ENV_VAR)
    resolved_level = (raw_level or "INFO").upper()
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(resolved_level)

    logging.getLogger("survival").debug("Logging configured at %s", resolved_level)
    return resolved_level
