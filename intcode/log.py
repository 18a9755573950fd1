"""
Logging setup shared by the intcode package and the intcodekit CLI.

Library modules only ever call ``logging.getLogger(__name__)``; handlers
are attached here, once, by whoever owns the process (the CLI, a notebook,
a test that wants to see the trace).

Log files: ``<log_dir>/<name>_YYYYMMDD_HHMMSS.log``
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from . import config


def setup_logging(
    name: str = config.LOGGER_NAME,
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
    log_dir: Optional[Path] = None,
    rich_console: bool = True,
) -> logging.Logger:
    """Configure and return the package logger.

    The console handler is a RichHandler by default; pass
    ``rich_console=False`` for plain stderr output (e.g. when piping).
    A file handler capturing everything at DEBUG is added only when
    ``log_dir`` is given.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)

    # ── File handler: captures everything (DEBUG+) ──
    log_file = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{name}_{ts}.log"
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(
            config.FILE_LOG_FORMAT, datefmt=config.FILE_DATE_FORMAT,
        ))
        logger.addHandler(fh)

    # ── Console handler: only important stuff (WARNING+ default) ──
    if rich_console:
        ch = RichHandler(
            level=console_level,
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    else:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(
            config.CONSOLE_LOG_FORMAT, datefmt=config.CONSOLE_DATE_FORMAT,
        ))
    ch.setLevel(console_level)
    logger.addHandler(ch)

    logger.debug("Logger initialized: %s", name)
    if log_file is not None:
        logger.debug("Log file: %s", log_file)
    logger.debug("Console level: %s", logging.getLevelName(console_level))

    return logger


def reset_logging(name: str = config.LOGGER_NAME) -> None:
    """Detach and close every handler installed by setup_logging()."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
