"""
Logging Configuration
Sets up the 'gocadtsurf' logger for the reader and the command line.

At DEBUG level the format also names the source line, which is where the
per-record messages (skipped vertices, dropped ATOM aliases, renamed
properties) become useful.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "gocadtsurf"

BRIEF_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEBUG_FORMAT = '%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s'


def make_formatter(level: int) -> logging.Formatter:
    """Brief format for INFO and above, source line numbers for DEBUG."""
    fmt = DEBUG_FORMAT if level <= logging.DEBUG else BRIEF_FORMAT
    return logging.Formatter(fmt, datefmt='%H:%M:%S')


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the package logger.

    Repeated calls replace the previous handlers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path of a log file, truncated on setup.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = make_formatter(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}.")
