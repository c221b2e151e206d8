"""Logging configuration for musicsync.

Two handlers hang off the root logger:
- a rotating file handler (10MB, 5 backups) that always records DEBUG
- a Rich console handler whose level follows the CLI's --log-level

setup_logging() installs both once per process; calling it again only moves
the console threshold, so a command can raise or lower verbosity without
duplicating handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FILENAME = "musicsync.log"

# Loggers that drown out the scan at DEBUG
NOISY_LOGGERS = ("sqlalchemy", "tinytag", "uvicorn.access")

_console_handler: Optional[RichHandler] = None


def _get_data_dir() -> Path:
    """Return the data directory (same as config.DATA_DIR without circular import)."""
    env = os.environ.get("DATA_DIR")
    if env:
        return Path(env)
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


def parse_log_level(name: str) -> int:
    """Map a level name to its logging constant, rejecting anything unknown."""
    level = name.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {name!r}, expected one of {', '.join(LOG_LEVELS)}")
    return getattr(logging, level)


def _file_handler(log_dir: Path) -> RotatingFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILENAME,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
        # paths with undecodable bytes must not break the log line
        errors="backslashreplace",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(levelname)-8s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def _console(level: int) -> RichHandler:
    console = Console(theme=Theme({"logging.level.info": "bold cyan"}))
    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=level <= logging.DEBUG,
    )
    handler.setLevel(level)
    return handler


def _quiet_noisy_loggers(level: int) -> None:
    quiet = logging.INFO if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Install the file and console handlers, or adjust the console level.

    Args:
        log_level: Console threshold (DEBUG, INFO, WARNING, ERROR)
        log_dir: Where musicsync.log goes; defaults to DATA_DIR
    """
    global _console_handler

    numeric_level = parse_log_level(log_level)

    _quiet_noisy_loggers(numeric_level)

    if _console_handler is not None:
        _console_handler.setLevel(numeric_level)
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(_file_handler(log_dir or _get_data_dir()))
    _console_handler = _console(numeric_level)
    root_logger.addHandler(_console_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the specified module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(name)
