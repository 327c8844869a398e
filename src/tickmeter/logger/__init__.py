"""Logging utilities for tickmeter.

Every module logs through a child of the ``tickmeter`` logger:

    >>> from tickmeter.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Ignoring update on finished progress %s", desc)

As a library, tickmeter only attaches a NullHandler; records propagate to
the host application's logging setup. Calling ``setup_logging()`` opts in
to tickmeter's own output: records then travel through a QueueHandler to a
QueueListener thread that owns the console (stderr) handler and, when
configured, a rotating file handler. Levels come from the ``[logging]``
section of ``settings.conf``; ``TICKMETER_LOG_DIR`` turns on file logging.

Rules:
    1. Always use ``get_logger(__name__)``
    2. Never call ``logging.basicConfig()``
    3. Use %-style arguments, not f-strings, in log calls
"""

from tickmeter.logger.formatters import ColoredConsoleFormatter
from tickmeter.logger.handlers import ConfigurationError
from tickmeter.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    load_log_settings,
    setup_logging,
)
from tickmeter.logger.state import _state, get_state

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "_state",  # For testing only
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "get_state",
    "load_log_settings",
    "setup_logging",
]
