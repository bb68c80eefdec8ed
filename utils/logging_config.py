"""Logging setup for applications embedding the uv manager core."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "uvmanager"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the ``uvmanager`` logger hierarchy once.

    ``level`` is usually ``ManagerSettings.log_level``. Unknown level names
    fall back to INFO.
    """

    resolved = logging.getLevelName((level or "INFO").upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(resolved)
    if not any(getattr(handler, "_uvmanager_handler", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._uvmanager_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
