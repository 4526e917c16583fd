"""Logging configuration for plannedpay.

Modules log through ``logging.getLogger(__name__)``; this sets up the single
handler on the package logger once, when the CLI starts.
"""

import logging

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure the ``plannedpay`` logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger

    Raises:
        ValueError: If the level name is unknown
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    logger = logging.getLogger("plannedpay")
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    logger.addHandler(handler)
    return logger
