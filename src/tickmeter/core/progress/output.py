"""Terminal and stream sinks for rendered progress frames.

- ``OverwriteLineSink`` redraws the status block in place with a carriage
  return, padding each line over the previous one.
- ``ClearAllSink`` wipes all prior output before every frame, for displays
  (notebook cells) that cannot clear part of what they show.
- ``AppendLineSink`` appends frames as plain lines for pipes and CI logs.
- ``JsonLinesSink`` writes each frame's fields as a JSON object per line.

Write errors are not suppressed: a broken pipe reaches the caller of the
progress method that triggered the render.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import TextIO

import orjson

from tickmeter.constants import (
    ANSI_CLEAR_SCREEN,
    ANSI_CLEAR_TO_END,
    ANSI_RESET,
    PROGRESS_COLORS,
)
from tickmeter.utils.progress_utils import truncate_text

from .progress_types import Frame


def is_interactive(stream: TextIO) -> bool:
    """Return True when ``stream`` is a terminal that understands ANSI.

    Args:
        stream: Output stream to inspect

    Returns:
        True for a TTY whose ``TERM`` is not ``dumb``

    """
    try:
        is_tty = bool(getattr(stream, "isatty", lambda: False)())
    except (AttributeError, ValueError, OSError):
        # closed or detached streams
        is_tty = False
    return is_tty and os.environ.get("TERM", "") != "dumb"


class _StreamSink:
    """Common stream handling for the text sinks."""

    def __init__(
        self, stream: TextIO | None = None, *, use_color: bool | None = None
    ) -> None:
        """Initialize the sink.

        Args:
            stream: Output stream (defaults to sys.stderr)
            use_color: Colourise lines; None enables colour on terminals

        """
        self.stream = stream or sys.stderr
        self.use_color = (
            is_interactive(self.stream) if use_color is None else use_color
        )

    def _colorize(self, text: str, color: str | None) -> str:
        if not self.use_color or color is None or not text:
            return text
        code = PROGRESS_COLORS.get(color)
        if code is None:
            return text
        return f"{code}{text}{ANSI_RESET}"

    def _emit(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()


class OverwriteLineSink(_StreamSink):
    """Redraw the status block in place.

    The first line is the status line; extra value lines follow it. Before
    each frame the cursor returns to the start of the block (carriage
    return, plus cursor-up when the previous frame had several lines) and
    every line is padded with spaces to the width of the line it replaces,
    so a shorter frame never leaves characters behind.

    Attributes:
        width: Maximum visible line width, or None for no truncation
        _row_widths: Visible widths of the rows currently on screen

    """

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        use_color: bool | None = None,
        width: int | None = None,
    ) -> None:
        """Initialize the sink.

        Args:
            stream: Output stream (defaults to sys.stderr)
            use_color: Colourise the status line; None detects a terminal
            width: Truncate lines to this many characters

        """
        super().__init__(stream, use_color=use_color)
        self.width = width
        self._row_widths: list[int] = []

    def write(self, frame: Frame) -> None:
        """Overwrite the previous frame with ``frame``."""
        rows_on_screen = len(self._row_widths)
        if not frame.lines and rows_on_screen == 0:
            return

        parts: list[str] = []
        if rows_on_screen > 1:
            parts.append(f"\033[{rows_on_screen - 1}A")
        parts.append("\r")

        new_widths: list[int] = []
        for row, line in enumerate(frame.lines):
            if self.width is not None:
                line = truncate_text(line, self.width)
            previous = self._row_widths[row] if row < rows_on_screen else 0
            color = frame.color if row == 0 else None
            if row > 0:
                parts.append("\n")
            parts.append(self._colorize(line, color))
            parts.append(" " * max(previous - len(line), 0))
            new_widths.append(len(line))

        if rows_on_screen > len(frame.lines):
            parts.append(ANSI_CLEAR_TO_END)
        if frame.final:
            parts.append("\n")

        self._emit("".join(parts))
        self._row_widths = [] if frame.final else new_widths


class ClearAllSink(_StreamSink):
    """Clear all prior output, then print the whole frame.

    For displays such as notebook cells, pass ``clear`` (for example
    ``functools.partial(IPython.display.clear_output, wait=True)``);
    without it the sink sends the ANSI clear-screen sequence.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        clear: Callable[[], None] | None = None,
        *,
        use_color: bool | None = None,
    ) -> None:
        """Initialize the sink.

        Args:
            stream: Output stream (defaults to sys.stdout)
            clear: Callable that wipes the display before each frame
            use_color: Colourise the status line; None detects a terminal

        """
        super().__init__(stream or sys.stdout, use_color=use_color)
        self.clear = clear

    def write(self, frame: Frame) -> None:
        """Clear the display and print ``frame``."""
        if self.clear is not None:
            self.clear()
            prefix = ""
        else:
            prefix = ANSI_CLEAR_SCREEN

        if not frame.lines:
            self._emit(prefix)
            return

        lines = [
            self._colorize(line, frame.color if row == 0 else None)
            for row, line in enumerate(frame.lines)
        ]
        self._emit(prefix + "\n".join(lines) + "\n")


class AppendLineSink(_StreamSink):
    """Append frames as plain lines, skipping exact repeats.

    Suited to pipes and CI logs where carriage returns would pile up in a
    single enormous line.
    """

    def __init__(
        self, stream: TextIO | None = None, *, use_color: bool = False
    ) -> None:
        """Initialize the sink.

        Args:
            stream: Output stream (defaults to sys.stderr)
            use_color: Colourise the status line

        """
        super().__init__(stream, use_color=use_color)
        self._last_text = ""

    def write(self, frame: Frame) -> None:
        """Append ``frame`` unless it repeats the previous one."""
        text = frame.text
        if not text or text == self._last_text:
            return

        lines = [
            self._colorize(line, frame.color if row == 0 else None)
            for row, line in enumerate(frame.lines)
        ]
        self._emit("\n".join(lines) + "\n")
        self._last_text = text


class JsonLinesSink:
    """Write ``Frame.fields`` as one JSON document per line."""

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the sink.

        Args:
            stream: Text output stream (defaults to sys.stderr)

        """
        self.stream = stream or sys.stderr

    def write(self, frame: Frame) -> None:
        """Serialise the frame's fields."""
        payload = orjson.dumps(
            {**frame.fields, "final": frame.final},
            default=str,
            option=orjson.OPT_APPEND_NEWLINE,
        )
        self.stream.write(payload.decode("utf-8"))
        self.stream.flush()


def default_sink(
    stream: TextIO | None = None,
) -> OverwriteLineSink | AppendLineSink:
    """Pick the sink for ``stream``: overwrite on terminals, append otherwise.

    Args:
        stream: Output stream (defaults to sys.stderr)

    Returns:
        A fresh sink bound to ``stream``

    """
    stream = stream or sys.stderr
    if is_interactive(stream):
        return OverwriteLineSink(stream)
    return AppendLineSink(stream)
