"""Shared types for the progress core: comparators, snapshots and frames."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tickmeter.constants import COMPARATOR_AT_LEAST, COMPARATOR_AT_MOST
from tickmeter.exceptions import ProgressConfigError

from .glyphs import BarGlyphs

# Label/value pairs shown under the status line. A callable is evaluated
# only when a render actually happens.
ExtraValue = tuple[str, Any]
ExtraValues = Sequence[ExtraValue] | Callable[[], Sequence[ExtraValue]]


class Comparator(Enum):
    """Completion test of a threshold-bounded progress."""

    AT_MOST = COMPARATOR_AT_MOST
    AT_LEAST = COMPARATOR_AT_LEAST

    @classmethod
    def parse(cls, value: Comparator | str) -> Comparator:
        """Return the comparator for ``"<="``/``">="`` (or ``≤``/``≥``).

        Raises:
            ProgressConfigError: For any other spelling

        """
        if isinstance(value, Comparator):
            return value
        normalized = {"≤": COMPARATOR_AT_MOST, "≥": COMPARATOR_AT_LEAST}.get(
            value, value
        )
        try:
            return cls(normalized)
        except ValueError:
            msg = f"expected '<=' or '>=', got {value!r}"
            raise ProgressConfigError(msg, target="comparator") from None

    def reached(self, value: float, threshold: float) -> bool:
        """Return True when ``value`` satisfies the threshold."""
        if self is Comparator.AT_MOST:
            return value <= threshold
        return value >= threshold


@dataclass(frozen=True, slots=True)
class SnapshotBase:
    """Fields every progress snapshot carries."""

    description: str
    start_time: float
    now: float
    extra_values: tuple[ExtraValue, ...]
    done: bool
    cancelled: bool
    cancel_message: str
    color: str | None
    cancel_color: str | None

    @property
    def elapsed(self) -> float:
        """Seconds since the progress was created."""
        return max(0.0, self.now - self.start_time)


@dataclass(frozen=True, slots=True)
class CountSnapshot(SnapshotBase):
    """Immutable view of a count-bounded progress."""

    total: int
    current: int
    bar_length: int
    glyphs: BarGlyphs
    show_speed: bool


@dataclass(frozen=True, slots=True)
class ThresholdSnapshot(SnapshotBase):
    """Immutable view of a threshold-bounded progress."""

    threshold: float
    comparator: Comparator
    current_value: float | None
    iterations: int


@dataclass(frozen=True, slots=True)
class UnknownSnapshot(SnapshotBase):
    """Immutable view of an unbounded progress."""

    counter: int


@dataclass(frozen=True, slots=True)
class Frame:
    """One rendered status block.

    Attributes:
        lines: Status line followed by one line per extra value
        color: Colour name for terminal sinks, or None
        final: True for the frame written by finish/cancel
        fields: Plain data behind the lines, for structured sinks

    """

    lines: tuple[str, ...]
    color: str | None = None
    final: bool = False
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """The lines joined with newlines."""
        return "\n".join(self.lines)
