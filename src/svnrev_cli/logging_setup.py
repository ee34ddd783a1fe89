"""Route svnrev log records to stderr through rich."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

HANDLER_NAME = "svnrev"
PACKAGE_LOGGERS = ("svnrev_core", "svnrev_ops", "svnrev_cli")

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}
DISABLED = {"off", "none", "disabled"}


def resolve_level(verbosity: str) -> Optional[int]:
    """Map a verbosity name to a logging level; None means logging is off."""
    name = verbosity.strip().lower()
    if name in DISABLED:
        return None
    return LEVELS.get(name, logging.WARNING)


def configure_logging(verbosity: str = "warning") -> None:
    level = resolve_level(verbosity)
    handler: Optional[logging.Handler] = None
    if level is not None:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.set_name(HANDLER_NAME)

    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if existing.get_name() == HANDLER_NAME:
                logger.removeHandler(existing)
        if handler is None:
            logger.setLevel(logging.CRITICAL + 1)
        else:
            logger.addHandler(handler)
            logger.setLevel(level)
        # Records stop at our handler instead of also reaching the root logger.
        logger.propagate = handler is None
