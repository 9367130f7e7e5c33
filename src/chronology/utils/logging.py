"""Logging configuration for Chronology.

Provides centralized logging setup with Rich console formatting
and optional file logging.

Example:
    >>> from chronology.utils.logging import setup_logging, get_logger, LogContext
    >>> setup_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.info("Loading items")
    >>> with LogContext("Bucketizing"):
    ...     # do work
    ... # Logs: "Bucketizing completed in 0.01s"
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


# =============================================================================
# Constants
# =============================================================================

PACKAGE_NAME = "chronology"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_console = Console(stderr=True)


# =============================================================================
# Setup Functions
# =============================================================================


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Configure logging for the chronology package.

    Sets up a Rich console handler on stderr and optionally a file handler.
    Calling it again replaces the previous handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    package_logger = logging.getLogger(PACKAGE_NAME)
    package_logger.setLevel(numeric_level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=_console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=numeric_level == logging.DEBUG,
    )
    console_handler.setLevel(numeric_level)
    package_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        package_logger.addHandler(file_handler)

    package_logger.propagate = False
    package_logger.debug(f"Logging configured: level={level}, file={log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger nested under the package logger.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        Logger inheriting the package configuration.
    """
    if not name.startswith(PACKAGE_NAME):
        name = f"{PACKAGE_NAME}.{name}"
    return logging.getLogger(name)


# =============================================================================
# Log Context Manager
# =============================================================================


class LogContext:
    """Context manager for timing and logging operations.

    Logs the start and completion of an operation with elapsed time.

    Attributes:
        message: Description of the operation.
        level: Log level for messages.
        logger: Logger instance to use.
        elapsed: Elapsed time in seconds (after exit).
    """

    def __init__(
        self,
        message: str,
        level: int = logging.INFO,
        logger: logging.Logger | None = None,
    ) -> None:
        self.message = message
        self.level = level
        self.logger = logger or logging.getLogger(PACKAGE_NAME)
        self.elapsed: float = 0.0
        self._start_time: float = 0.0

    def __enter__(self) -> "LogContext":
        self._start_time = time.perf_counter()
        self.logger.log(self.level, f"{self.message}...")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.elapsed = time.perf_counter() - self._start_time

        if exc_type is not None:
            self.logger.error(f"{self.message} failed after {self.elapsed:.2f}s: {exc_val}")
        else:
            self.logger.log(self.level, f"{self.message} completed in {self.elapsed:.2f}s")
