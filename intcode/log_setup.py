"""
Intcode VM — Logging Setup

Same pattern as the other toolkit CLIs: a Rich console handler for what the
user should see, plus an optional file handler that captures everything.
Library modules only ever call logging.getLogger(__name__); nothing is
configured until a CLI calls setup_logging().
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    name: str = "intcode",
    console_level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    rich_tracebacks: bool = False,
) -> logging.Logger:
    """Configure and return the package logger.

    Console: RichHandler on stderr at console_level.
    File:    everything (DEBUG+) when log_file is given.
    Calling it again replaces the handlers installed by the previous call.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG if log_file else console_level)
    logger.propagate = False

    ch = RichHandler(
        level=console_level,
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=rich_tracebacks,
    )
    logger.addHandler(ch)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(fh)
        logger.info("Log file: %s", log_file)

    return logger


def level_from_verbosity(verbose: int = 0, quiet: bool = False) -> int:
    """-q -> ERROR, default -> WARNING, -v -> INFO, -vv -> DEBUG."""
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING
