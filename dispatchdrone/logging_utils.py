"""Mini README: Application-wide logging helpers for Dispatchdrone.

Structure:
    * configure_root_logger - installs the shared handler and level once.
    * get_logger - factory returning module loggers with baseline config.

Usage:
    Every module creates ``LOGGER = get_logger(__name__)``. Planning code logs
    batch summaries at INFO and per-drone decisions at DEBUG, so raising the
    configured level to DEBUG is enough to trace why a dispatch was skipped.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Attach the shared stream handler to the root logger exactly once."""

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if _LOGGER_INITIALISED:
        root_logger.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    if not _LOGGER_INITIALISED:
        configure_root_logger()
    return logging.getLogger(name)
