"""Formatting helpers for progress rendering.

Pure functions with no state: durations, percentages, speed and the bar
itself. The renderer composes these into status lines.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from tickmeter.constants import ETA_UNKNOWN

if TYPE_CHECKING:
    from tickmeter.core.progress.glyphs import BarGlyphs

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600

# (seconds per unit, unit label), largest first
SPEED_UNITS: tuple[tuple[float, str], ...] = (
    (1.0, "s"),
    (1e-3, "ms"),
    (1e-6, "μs"),
    (1e-9, "ns"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Args:
        value: Non-negative number

    Returns:
        Rounded integer (``round`` would send 2.5 to 2)

    """
    return math.floor(value + 0.5)


def format_duration(seconds: float) -> str:
    """Format a duration as ``H:MM:SS``.

    Hours are not wrapped into days, so 100 hours reads ``100:00:00``.

    Args:
        seconds: Duration in seconds; negatives count as zero

    Returns:
        Formatted string like "0:00:30"

    """
    if not math.isfinite(seconds) or seconds <= 0:
        seconds = 0.0

    total = round_half_up(seconds)
    hours, rest = divmod(total, SECONDS_PER_HOUR)
    minutes, secs = divmod(rest, SECONDS_PER_MINUTE)
    return f"{hours}:{minutes:02d}:{secs:02d}"


def format_eta(seconds: float | None) -> str:
    """Format an ETA, or ``N/A`` when it cannot be estimated.

    Args:
        seconds: Remaining seconds, or None

    Returns:
        Formatted string like "0:01:05" or "N/A"

    """
    if seconds is None or not math.isfinite(seconds):
        return ETA_UNKNOWN
    return format_duration(seconds)


def estimate_eta(elapsed: float, current: int, total: int) -> float | None:
    """Linear time-to-completion estimate.

    Args:
        elapsed: Seconds spent so far
        current: Units completed
        total: Units expected

    Returns:
        Remaining seconds, or None before the first unit completes

    """
    if current <= 0:
        return None
    return elapsed * max(total - current, 0) / current


def format_percentage(fraction: float) -> str:
    """Format a completion fraction as a right-aligned integer percent.

    Args:
        fraction: Completion in [0, 1]; values outside are clamped

    Returns:
        Formatted string like " 25%"

    """
    fraction = max(0.0, min(fraction, 1.0))
    return f"{round_half_up(100 * fraction):>3d}%"


def format_speed(seconds_per_item: float | None) -> str:
    """Format iteration speed with an adaptive time unit.

    Args:
        seconds_per_item: Average seconds per completed unit

    Returns:
        Formatted string like "12.50 ms/it"

    """
    if (
        seconds_per_item is None
        or not math.isfinite(seconds_per_item)
        or seconds_per_item <= 0
    ):
        return f"{ETA_UNKNOWN}  s/it"

    for scale, unit in SPEED_UNITS:
        if seconds_per_item > 0.99 * scale:
            return f"{seconds_per_item / scale:5.2f} {unit:>2}/it"

    scale, unit = SPEED_UNITS[-1]
    return f"{seconds_per_item / scale:5.2f} {unit:>2}/it"


def render_bar(fraction: float, width: int, glyphs: BarGlyphs) -> str:
    """Render a bar of ``width`` cells between the glyph caps.

    The cell holding the progress front is drawn with the partial glyph at
    ``floor(remainder * len(glyphs.intermediate))``. A complete bar is all
    fill, never a partial glyph. A zero width bar renders as nothing.

    Args:
        fraction: Completion in [0, 1]; values outside are clamped
        width: Number of cells between the caps
        glyphs: Glyph set to draw with

    Returns:
        Bar string like "|███▌      |"

    """
    if width <= 0:
        return ""

    fraction = max(0.0, min(fraction, 1.0))
    if fraction >= 1.0:
        return f"{glyphs.left}{glyphs.fill * width}{glyphs.right}"

    exact = fraction * width
    filled = math.floor(exact)
    remainder = exact - filled

    cells = glyphs.fill * filled
    if remainder > 0:
        partials = glyphs.intermediate
        index = min(math.floor(remainder * len(partials)), len(partials) - 1)
        cells += partials[index]
        filled += 1

    cells += glyphs.empty * (width - filled)
    return f"{glyphs.left}{cells}{glyphs.right}"


def truncate_text(text: str, max_length: int, ellipsis: str = "...") -> str:
    """Truncate text to maximum length with ellipsis.

    Args:
        text: Text to truncate
        max_length: Maximum length including ellipsis
        ellipsis: String to append when truncating

    Returns:
        Truncated text with ellipsis if needed

    """
    if len(text) <= max_length:
        return text

    if max_length <= len(ellipsis):
        return ellipsis[:max_length]

    return text[: max_length - len(ellipsis)] + ellipsis
