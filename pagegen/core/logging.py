# core/logging.py
from __future__ import annotations
import logging
import os
from typing import Optional

ROOT_LOGGER = "pagegen"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(h)
    root.propagate = os.getenv("LOG_PROPAGATE", "false").strip().lower() in {"1", "true", "yes", "on"}
    return root


def get_logger(name: str = ROOT_LOGGER, level: Optional[str] = None) -> logging.Logger:
    """Named logger under the ``pagegen`` tree; one shared handler on the root."""
    _configure_root()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(level.upper())
    return logger
