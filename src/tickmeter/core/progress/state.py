"""Progress state variants.

- ``CountProgress``: a known number of steps; draws a bar, percent and ETA
- ``ThresholdProgress``: a measured value approaching a target
- ``UnknownProgress``: a bare counter with no notion of a total

Every variant owns one lock and is mutated only through the driver
methods inherited from ``ProgressDriver``. A progress never starts
threads or timers; all work happens inside those calls.

Example:
    >>> progress = CountProgress(3, description="Copying: ", output=sink)
    >>> for _ in range(3):
    ...     progress.next()
    >>> progress.is_done()
    True

"""

from __future__ import annotations

import numbers
from typing import TYPE_CHECKING, Any

from tickmeter.exceptions import ProgressConfigError
from tickmeter.logger import get_logger

from .driver import ProgressDriver
from .glyphs import BarGlyphs, default_glyphs
from .options import resolve_options
from .progress_types import (
    Comparator,
    CountSnapshot,
    ThresholdSnapshot,
    UnknownSnapshot,
)

if TYPE_CHECKING:
    from .options import ProgressOptions
    from .progress_types import ExtraValues

logger = get_logger(__name__)


def _require_count(value: Any, name: str) -> int:
    """Return ``value`` as an int, rejecting bools, floats and negatives."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        msg = f"expected a non-negative integer, got {value!r}"
        raise ProgressConfigError(msg, target=name)
    if value < 0:
        msg = f"must be >= 0, got {value}"
        raise ProgressConfigError(msg, target=name)
    return int(value)


class CountProgress(ProgressDriver):
    """Progress over a fixed number of steps.

    Reaching ``total`` (through ``next`` or ``update``) finishes the
    progress and forces the 100% frame. A zero total is complete on the
    first call.

    Attributes:
        total: Number of steps, fixed at construction
        current: Steps completed so far, never decreasing
        bar_length: Bar cells
        glyphs: Glyph set the bar is drawn with
        color: Colour name of the status line
        show_speed: Append seconds per step to the status line

    """

    def __init__(
        self,
        total: int,
        options: ProgressOptions | None = None,
        **overrides: Any,
    ) -> None:
        """Create a count-bounded progress.

        Args:
            total: Number of steps (>= 0)
            options: Base options; None starts from the settings file
            **overrides: ProgressOptions fields overriding ``options``

        Raises:
            ProgressConfigError: If ``total`` or an option is invalid

        """
        total = _require_count(total, "total")
        opts = resolve_options(options, overrides)
        super().__init__(opts)

        self.total = total
        self.current = 0
        self.bar_length = opts.resolve_bar_length()
        self.glyphs: BarGlyphs = opts.glyphs or default_glyphs()
        self.color = opts.color
        self.show_speed = opts.show_speed

    def record(self, value: Any = None) -> None:
        """Increment by one (``None``) or move to an absolute count.

        Counts below the current one are ignored so ``current`` stays
        monotonic.

        Raises:
            ValueError: For negative or non-integer counts

        """
        if value is None:
            self.current += 1
            return

        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            msg = f"count must be an integer, got {value!r}"
            raise ValueError(msg)
        if value < 0:
            msg = f"count must be >= 0, got {value}"
            raise ValueError(msg)
        if value < self.current:
            logger.debug(
                "Keeping count %d for %r, ignoring lower value %d",
                self.current,
                self.description,
                value,
            )
            return
        self.current = int(value)

    def next(self, values: ExtraValues | None = None) -> None:
        """Advance by one step.

        Args:
            values: Extra label/value pairs for this render

        """
        self._drive(None, values)

    def _reached_end(self) -> bool:
        return self.current >= self.total

    def _complete(self) -> None:
        self.current = max(self.current, self.total)

    def snapshot(self, now: float | None = None) -> CountSnapshot:
        """Return an immutable view of the progress."""
        return CountSnapshot(
            description=self.description,
            start_time=self.start_time,
            now=self._clock() if now is None else now,
            extra_values=self._resolved_extra_values(),
            done=self.done,
            cancelled=self.cancelled,
            cancel_message=self.cancel_message,
            color=self.color,
            cancel_color=self.options.cancel_color,
            total=self.total,
            current=self.current,
            bar_length=self.bar_length,
            glyphs=self.glyphs,
            show_speed=self.show_speed,
        )


class ThresholdProgress(ProgressDriver):
    """Progress of a value converging on a threshold.

    The value may move in either direction. The progress finishes once
    ``comparator`` holds between the latest value and ``threshold``, for
    example a loss dropping to ``1e-5`` or below with ``"<="``.

    Attributes:
        threshold: Target value, fixed at construction
        comparator: Completion test
        current_value: Latest value, None before the first update
        iterations: Number of update() calls applied

    """

    def __init__(
        self,
        threshold: float,
        comparator: Comparator | str = Comparator.AT_MOST,
        options: ProgressOptions | None = None,
        **overrides: Any,
    ) -> None:
        """Create a threshold-bounded progress.

        Args:
            threshold: Target value (>= 0)
            comparator: ``"<="`` or ``">="``
            options: Base options; None starts from the settings file
            **overrides: ProgressOptions fields overriding ``options``

        Raises:
            ProgressConfigError: If the threshold, comparator or an option
                is invalid

        """
        if isinstance(threshold, bool) or not isinstance(
            threshold, numbers.Real
        ):
            msg = f"expected a number, got {threshold!r}"
            raise ProgressConfigError(msg, target="threshold")
        if threshold < 0:
            msg = f"must be >= 0, got {threshold}"
            raise ProgressConfigError(msg, target="threshold")

        self.comparator = Comparator.parse(comparator)
        opts = resolve_options(options, overrides)
        super().__init__(opts)

        self.threshold = float(threshold)
        self.current_value: float | None = None
        self.iterations = 0

    def record(self, value: Any = None) -> None:
        """Store the latest measured value."""
        if value is None:
            msg = "ThresholdProgress.update() needs a value"
            raise TypeError(msg)
        self.current_value = float(value)
        self.iterations += 1

    def _reached_end(self) -> bool:
        return self.current_value is not None and self.comparator.reached(
            self.current_value, self.threshold
        )

    def snapshot(self, now: float | None = None) -> ThresholdSnapshot:
        """Return an immutable view of the progress."""
        return ThresholdSnapshot(
            description=self.description,
            start_time=self.start_time,
            now=self._clock() if now is None else now,
            extra_values=self._resolved_extra_values(),
            done=self.done,
            cancelled=self.cancelled,
            cancel_message=self.cancel_message,
            color=self.options.color,
            cancel_color=self.options.cancel_color,
            threshold=self.threshold,
            comparator=self.comparator,
            current_value=self.current_value,
            iterations=self.iterations,
        )


class UnknownProgress(ProgressDriver):
    """Progress without a known end: a counter and the elapsed time.

    Attributes:
        counter: Latest value passed to update()

    """

    def __init__(
        self,
        options: ProgressOptions | None = None,
        **overrides: Any,
    ) -> None:
        """Create an unbounded progress.

        Args:
            options: Base options; None starts from the settings file
            **overrides: ProgressOptions fields overriding ``options``

        """
        opts = resolve_options(options, overrides)
        super().__init__(opts)
        self.counter = 0

    def record(self, value: Any = None) -> None:
        """Set the counter to ``value``; it may go up or down."""
        if value is None:
            msg = "UnknownProgress.update() needs a value"
            raise TypeError(msg)
        self.counter = int(value)

    def snapshot(self, now: float | None = None) -> UnknownSnapshot:
        """Return an immutable view of the progress."""
        return UnknownSnapshot(
            description=self.description,
            start_time=self.start_time,
            now=self._clock() if now is None else now,
            extra_values=self._resolved_extra_values(),
            done=self.done,
            cancelled=self.cancelled,
            cancel_message=self.cancel_message,
            color=self.options.color,
            cancel_color=self.options.cancel_color,
            counter=self.counter,
        )
