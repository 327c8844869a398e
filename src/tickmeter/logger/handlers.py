"""Handler creation for the tickmeter logging system.

Console output goes to ``stderr`` so log lines never mix with data a caller
pipes through ``stdout``. File output is optional and rotates by size. Both
handlers sit behind a QueueListener so a thread holding a progress lock
never blocks on log I/O.
"""

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

from tickmeter.constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_DATE_FORMAT,
    LOG_CONSOLE_FORMAT,
    LOG_FILE_DATE_FORMAT,
    LOG_FILE_FORMAT,
    LOG_ROTATION_THRESHOLD_BYTES,
    ROOT_LOGGER_NAME,
)
from tickmeter.logger.formatters import ColoredConsoleFormatter
from tickmeter.logger.state import _LoggerState


class ConfigurationError(Exception):
    """Raised when a log handler cannot be created."""


def _level(name: str, fallback: int) -> int:
    """Map a level name such as "DEBUG" to its number."""
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else fallback


def _create_console_handler(level_name: str) -> logging.Handler:
    """Build the coloured ``stderr`` handler.

    Args:
        level_name: Minimum level shown on the console

    Returns:
        StreamHandler bound to sys.stderr

    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level(level_name, logging.WARNING))
    handler.setFormatter(
        ColoredConsoleFormatter(
            LOG_CONSOLE_FORMAT, datefmt=LOG_CONSOLE_DATE_FORMAT
        )
    )
    return handler


def _create_file_handler(
    log_file: Path, level_name: str
) -> logging.Handler:
    """Build a size-rotated file handler, creating its directory.

    Args:
        log_file: Destination file
        level_name: Minimum level written to the file

    Returns:
        RotatingFileHandler writing UTF-8

    Raises:
        ConfigurationError: If the directory or file cannot be opened

    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=LOG_ROTATION_THRESHOLD_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        msg = f"Cannot open log file {log_file}: {e}"
        raise ConfigurationError(msg) from e

    handler.setLevel(_level(level_name, logging.INFO))
    handler.setFormatter(
        logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_FILE_DATE_FORMAT)
    )
    return handler


def setup_root_logger(
    state: _LoggerState,
    console_level: str,
    file_level: str,
    log_file: Path | None,
) -> None:
    """Route the ``tickmeter`` logger through a queue to its handlers.

    Must be called with ``state.lock`` held.

    Args:
        state: Shared logger state, updated in place
        console_level: Console level name
        file_level: File level name
        log_file: Log file path, or None for console only

    Raises:
        ConfigurationError: If the file handler cannot be created

    """
    targets = [_create_console_handler(console_level)]
    if log_file is not None:
        targets.append(_create_file_handler(log_file, file_level))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)  # handlers filter
    root.propagate = False
    for stale in list(root.handlers):
        root.removeHandler(stale)
        stale.close()

    log_queue: queue.Queue = queue.Queue()
    listener = QueueListener(log_queue, *targets, respect_handler_level=True)
    listener.start()
    root.addHandler(QueueHandler(log_queue))

    state.log_queue = log_queue
    state.queue_listener = listener
    state.root_initialized = True
