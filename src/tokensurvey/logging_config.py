"""Logging setup for the command line.

Diagnostics go to stderr through a rich handler so stdout carries only the
report.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug: bool = False, log_file: str | None = None) -> logging.Logger:
    """Install a stderr rich handler, and optionally a file handler.

    Parameters
    ----------
    debug
        Log at DEBUG and show timestamps and source locations. Otherwise
        only warnings and errors (skipped files, bad ignore files, failures)
        are shown.
    log_file
        Path to append plain-text log lines to.

    Returns
    -------
    logging.Logger
        The ``tokensurvey`` package logger, set to the chosen level.
    """
    level = logging.DEBUG if debug else logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_time=debug,
            show_path=debug,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # No-op when the root logger is already configured (e.g. under pytest).
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers)

    logger = logging.getLogger("tokensurvey")
    logger.setLevel(level)
    return logger
