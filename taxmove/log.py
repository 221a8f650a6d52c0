"""Logging configuration for the taxmove CLI."""

from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
import sys
from typing import TextIO

PACKAGE_LOGGER = "taxmove"


class ReadableFormatter(logging.Formatter):
    """``[date][time][logger][LEVEL] message``, with the level colored on terminals."""

    COLORS = {
        "DEBUG": "\033[37m",
        "INFO": "\033[97m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def __init__(self, use_color: bool = False) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_color:
            level = f"{self.COLORS.get(level, self.COLORS['RESET'])}{level}{self.COLORS['RESET']}"
        stamp = datetime.fromtimestamp(record.created).strftime("[%Y-%m-%d][%H:%M:%S]")
        message = f"{stamp}[{record.name}][{level}] {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(verbose: bool = False, log_file: str | Path | None = None, stream: TextIO | None = None) -> logging.Logger:
    """Attach handlers to the package logger. Safe to call more than once."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream = stream if stream is not None else sys.stderr
    console = logging.StreamHandler(stream)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(ReadableFormatter(use_color=stream.isatty()))
    logger.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(ReadableFormatter())
        logger.addHandler(file_handler)
    return logger
