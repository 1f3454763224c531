import atexit
import logging
import os
import sys
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler


class CenteredFormatter(logging.Formatter):
    longest_name_length = 16  # grows with the longest logger name seen

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=16):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.longest_name_length = initial_width

    def format(self, record):
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(record.name)
        )
        width = CenteredFormatter.longest_name_length
        record.name = record.name.center(width)
        return super().format(record)


_console: Console | None = None
_log_file: TextIO | None = None


def _shared_console() -> Console:
    """
    Textual owns the terminal while the app runs, so logs go to
    STORE_LOG_FILE when it is set, stderr otherwise.
    """
    global _console, _log_file
    if _console is None:
        log_path = os.getenv("STORE_LOG_FILE")
        if log_path:
            _log_file = open(log_path, "a", encoding="utf-8")
            atexit.register(close_log_file)
            _console = Console(file=_log_file, width=120)
        else:
            _console = Console(stderr=True)
    return _console


def close_log_file() -> None:
    """Close STORE_LOG_FILE; later records go to stderr."""
    global _log_file
    if _log_file is None:
        return
    if _console is not None:
        _console.file = sys.stderr
    _log_file.close()
    _log_file = None


def get_logger(name=None) -> logging.Logger:
    """
    Creates and returns a logger configured with RichHandler for rich output.
    """
    if name is None:
        name = "organi"
    logger = logging.getLogger(name)
    log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        formatter = CenteredFormatter("[%(name)s]  %(message)s")

        handler = RichHandler(
            console=_shared_console(),
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger for '{name}' ready.")

    return logger
