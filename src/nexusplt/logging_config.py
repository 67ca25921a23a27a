"""
Logging configuration for the nexusplt package.
"""

import logging
import sys


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """
    Configure the 'nexusplt' logger.

    Parameters
    ----------
    level : int
        Logging level, e.g. ``logging.DEBUG`` to trace header, catalog and
        block decoding.
    log_file : str, optional
        Also write log records to this file.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    logger = logging.getLogger("nexusplt")
    logger.setLevel(level)

    # Drop handlers from an earlier call so records are not duplicated
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
