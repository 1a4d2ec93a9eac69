"""Logging configuration for codexreview."""

import logging
import os
import sys


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger that writes to stderr.

    Args:
        name: Logger name, usually ``__name__``.

    Returns:
        Logger with a single stderr handler.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter('[%(name)s] %(levelname)s: %(message)s'))
        logger.addHandler(handler)
        logger.propagate = False

    level = os.environ.get('CODEX_LOG_LEVEL', 'INFO').upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
