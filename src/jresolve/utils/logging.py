"""
Logging configuration for jresolve.

Everything goes to stderr (or a log file) so resolved JSON on stdout stays
clean for piping.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


class FileFormatter(logging.Formatter):
    """Formatter for file logs - clean and parseable."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


class ConsoleFormatter(logging.Formatter):
    """Plain console format: ``LEVEL: message``, with file:line for errors."""

    def format(self, record: logging.LogRecord) -> str:
        base_format = f"{record.levelname}: {record.getMessage()}"
        if record.levelno >= logging.ERROR and record.pathname:
            filename = Path(record.pathname).name
            base_format = f"{record.levelname}: {filename}:{record.lineno} - {record.getMessage()}"
        return base_format


# Map string level names to logging constants
LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(level: str | int) -> int:
    """
    Parse logging level from string or int.

    Args:
        level: Logging level as string (DEBUG, INFO, etc.) or int

    Returns:
        Logging level constant
    """
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level_upper = level.upper()
        if level_upper in LEVEL_MAP:
            return LEVEL_MAP[level_upper]
    # Default to WARNING if invalid
    return logging.WARNING


def setup_logging(
    level: str | int = logging.WARNING,
    log_file: str | Path | None = None,
    format_string: str | None = None,
    file_mode: str = "a",
    console: Console | None = None,
    console_enabled: bool = True,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Setup logging configuration for jresolve.

    Args:
        level: Logging level as string (DEBUG, INFO, etc.) or int (default: WARNING)
        log_file: Optional file path to write logs to (default: None, console only)
        format_string: Optional custom format string for the plain console handler
        file_mode: File mode for file handler - 'a' for append, 'w' for overwrite (default: 'a')
        console: Optional Rich Console to log to (default: a new stderr console)
        console_enabled: Whether to enable console logging (default: True)
        use_rich: Use RichHandler instead of a plain StreamHandler (default: True)

    Returns:
        Logger instance
    """
    logger = logging.getLogger("jresolve")

    # Only clear handlers from this logger, not root or child loggers
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    level_int = _parse_level(level)
    logger.setLevel(level_int)

    if console_enabled:
        handler: logging.Handler
        if use_rich:
            handler = RichHandler(
                console=console or Console(stderr=True),
                level=level_int,
                show_time=False,
                show_path=level_int <= logging.DEBUG,
                markup=False,
                rich_tracebacks=True,
            )
        else:
            handler = logging.StreamHandler(sys.stderr)
            handler.setLevel(level_int)
            handler.setFormatter(logging.Formatter(format_string) if format_string else ConsoleFormatter())
        logger.addHandler(handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode=file_mode)
        # The logger level still filters; the file captures whatever passes
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter())
        logger.addHandler(file_handler)

    return logger


def setup_logging_from_config(config: Any, console: Console | None = None) -> logging.Logger:
    """
    Setup logging from the ``logging`` section of jresolve settings.

    Args:
        config: Settings object or plain dict
        console: Optional Rich Console for the RichHandler

    Returns:
        Logger instance
    """
    logging_config = config.get("logging", {}) or {}

    console_type = logging_config.get("console_type", "rich")
    return setup_logging(
        level=logging_config.get("level", logging.WARNING),
        log_file=logging_config.get("file"),
        format_string=logging_config.get("format"),
        file_mode=logging_config.get("file_mode", "a"),
        console=console,
        console_enabled=logging_config.get("console_enabled", True),
        use_rich=console_type == "rich",
    )


def get_logger(name: str = "jresolve") -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (default: "jresolve")

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
