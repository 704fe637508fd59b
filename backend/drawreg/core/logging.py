"""
Logging configuration for the drawing register.

Modules log through ``logging.getLogger(__name__)``; this sets up the
``drawreg`` logger tree once at startup.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """
    Attach a stdout handler to the ``drawreg`` logger.

    Args:
        level: Level name (e.g. "DEBUG") or number.

    Returns:
        The package root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("drawreg")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)

    return logger
