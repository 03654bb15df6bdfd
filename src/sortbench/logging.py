"""Logging setup for sortbench.

Console output goes to stderr so that reports written to stdout (CSV,
Markdown) stay clean. The optional log file always records DEBUG,
including the thread name, which identifies the worker that ran a job.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "sortbench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"


def _console_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Install the console (and optional file) handler on the sortbench logger.

    Calling it again replaces the previous handlers, closing them. The
    logger stops propagating so a host application's root handlers do
    not print every dispatch twice.

    Args:
        verbose: Console shows DEBUG, including one line per dispatched job.
        quiet: Console shows warnings and errors only. *verbose* wins.
        log_file: Also write DEBUG records to this path.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(_console_level(verbose, quiet))
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """``sortbench.<name>``, handled by whatever :func:`setup_logging` installed."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
