"""Logger setup shared by the skyscrapers package."""

from __future__ import annotations
import logging
from typing import Optional

LOGGER_NAME = "skyscrapers"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return the package logger, or a child of it.

    The first call installs a stderr handler at INFO level on the package
    logger, unless one is already configured.

    Args:
        name: Optional child name, e.g. "solvers.parallel".
    """
    root = logging.getLogger(LOGGER_NAME)

    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    if name:
        return root.getChild(name)
    return root


def set_level(level: int) -> None:
    """Change the package log level, e.g. to logging.DEBUG for --verbose."""
    get_logger().setLevel(level)
