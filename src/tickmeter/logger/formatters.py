"""Logging formatters for console output."""

import logging

from tickmeter.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter that colours the level name.

    The record's ``levelname`` is swapped for a coloured copy only while
    the parent formatter runs, so handlers sharing the record still see
    the plain name.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` with an ANSI-coloured level name.

        Args:
            record: The log record to format

        Returns:
            Formatted log line

        """
        color = LOG_COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        original_levelname = record.levelname
        record.levelname = f"{color}{original_levelname}{LOG_COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname
