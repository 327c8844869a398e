"""Construction-time options for progress states.

``ProgressOptions`` is frozen: defaults are applied once when a progress
state is built and never change afterwards. Settings from
``settings.conf`` feed the defaults through ``from_settings``; keyword
overrides given to a constructor win over both.
"""

from __future__ import annotations

import math
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from numbers import Integral, Real
from typing import TYPE_CHECKING, Any

from tickmeter.config.settings import load_settings
from tickmeter.constants import (
    BAR_RESERVED_COLUMNS,
    DEFAULT_CANCEL_COLOR,
    DEFAULT_CANCEL_MESSAGE,
    DEFAULT_COLOR,
    DEFAULT_DESCRIPTION,
    DEFAULT_MIN_INTERVAL,
    FALLBACK_TERMINAL_WIDTH,
    MAX_AUTO_BAR_LENGTH,
    PROGRESS_COLORS,
    SPEED_RESERVED_COLUMNS,
)
from tickmeter.exceptions import ProgressConfigError

from .glyphs import BarGlyphs, parse_glyphs

if TYPE_CHECKING:
    from tickmeter.core.protocols.progress import OutputSink


@dataclass(frozen=True, slots=True)
class ProgressOptions:
    """Options shared by every progress variant.

    Attributes:
        min_interval: Seconds between two non-forced redraws
        description: Label printed before the status
        bar_length: Bar cells; None derives it from the terminal width
        glyphs: Glyph set or five character spec; None for the default set
        color: Colour of the status line, None for plain text
        cancel_color: Colour of the cancellation message
        cancel_message: Line shown by cancel(); empty hides it
        output: Sink receiving frames; None picks one for sys.stderr
        enabled: False keeps counting but never writes
        show_speed: Append seconds per item to count-bounded lines
        clock: Monotonic time source

    """

    min_interval: float = DEFAULT_MIN_INTERVAL
    description: str = DEFAULT_DESCRIPTION
    bar_length: int | None = None
    glyphs: BarGlyphs | str | None = None
    color: str | None = DEFAULT_COLOR
    cancel_color: str | None = DEFAULT_CANCEL_COLOR
    cancel_message: str = DEFAULT_CANCEL_MESSAGE
    output: OutputSink | None = None
    enabled: bool = True
    show_speed: bool = False
    clock: Callable[[], float] = time.monotonic

    def __post_init__(self) -> None:
        """Validate and normalise fields."""
        if (
            isinstance(self.min_interval, bool)
            or not isinstance(self.min_interval, Real)
            or not math.isfinite(self.min_interval)
            or self.min_interval < 0
        ):
            msg = f"must be a finite number >= 0, got {self.min_interval!r}"
            raise ProgressConfigError(msg, target="min_interval")

        if self.bar_length is not None and (
            isinstance(self.bar_length, bool)
            or not isinstance(self.bar_length, Integral)
            or self.bar_length < 0
        ):
            msg = f"must be an integer >= 0, got {self.bar_length!r}"
            raise ProgressConfigError(msg, target="bar_length")

        if self.glyphs is not None:
            if self.bar_length == 0:
                msg = "a zero-length bar cannot use custom glyphs"
                raise ProgressConfigError(msg, target="bar_length")
            object.__setattr__(self, "glyphs", parse_glyphs(self.glyphs))

        for field_name in ("color", "cancel_color"):
            value = getattr(self, field_name)
            if value in ("", "none"):
                object.__setattr__(self, field_name, None)
            elif value is not None and value not in PROGRESS_COLORS:
                known = ", ".join(sorted(PROGRESS_COLORS))
                msg = f"unknown colour {value!r} (expected one of {known})"
                raise ProgressConfigError(msg, target=field_name)

    @classmethod
    def from_settings(cls, **overrides: Any) -> ProgressOptions:
        """Build options from ``settings.conf`` plus keyword overrides.

        Raises:
            SettingsError: If the settings file holds unparsable values
            ProgressConfigError: If the merged options are invalid

        """
        configured = {
            key: value
            for key, value in load_settings()["progress"].items()
            if value is not None
        }
        configured.update(overrides)
        return cls(**configured)

    def resolve_bar_length(self) -> int:
        """Return the bar width, deriving it from the terminal if unset."""
        if self.bar_length is not None:
            return self.bar_length

        try:
            columns = shutil.get_terminal_size().columns
        except (AttributeError, ValueError, OSError):
            columns = FALLBACK_TERMINAL_WIDTH

        reserved = len(self.description) + BAR_RESERVED_COLUMNS
        if self.show_speed:
            reserved += SPEED_RESERVED_COLUMNS
        return max(0, min(columns - reserved, MAX_AUTO_BAR_LENGTH))


def resolve_options(
    options: ProgressOptions | None, overrides: dict[str, Any]
) -> ProgressOptions:
    """Merge constructor keyword overrides into ``options``.

    Args:
        options: Explicit options, or None to start from settings
        overrides: Keyword arguments given to a progress constructor

    Returns:
        The options the progress state will use

    """
    if options is None:
        return ProgressOptions.from_settings(**overrides)
    if overrides:
        return replace(options, **overrides)
    return options
