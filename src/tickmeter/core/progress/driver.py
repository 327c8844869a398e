"""Driver surface shared by every progress variant.

``next``/``update``/``finish``/``cancel`` are the only calls that mutate a
progress. Each one runs a single critical section under the progress lock:

    mutate -> throttle check -> snapshot -> render -> write -> advance clock

so concurrent workers never lose an increment and no frame is built from
a half-applied mutation.

Design notes:
- Timing: one clock sample per call; the throttle compares it with the
  time of the last successful write.
- Errors: a failing sink propagates to the caller. The lock is released
  by the ``with`` block and ``last_render_time`` stays where it was.
- Terminal states: once finished or cancelled, further calls are ignored
  (logged at DEBUG) so instrumentation on early-exit paths needs no guard.
  The exception is a terminal frame the sink rejected: the matching
  finish() or cancel() writes it again.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Self

from tickmeter.core.protocols.progress import NullSink
from tickmeter.logger import get_logger

from .output import default_sink
from .render import render
from .throttle import should_render

if TYPE_CHECKING:
    import types

    from tickmeter.core.protocols.progress import OutputSink

    from .options import ProgressOptions
    from .progress_types import ExtraValue, ExtraValues, Frame, SnapshotBase

logger = get_logger(__name__)


class ProgressDriver:
    """Lock, throttle and render plumbing for a progress state.

    Subclasses provide the mutation (``record``), the completion test
    (``_reached_end``) and the view (``snapshot``).

    Attributes:
        options: Options the progress was built with
        start_time: Clock reading at construction
        last_render_time: Clock reading of the last successful write
        min_interval: Seconds between non-forced renders
        description: Label printed before the status
        output: Sink receiving frames
        extra_values: Label/value pairs shown under the status line
        done: True once finished or cancelled
        cancelled: True once cancelled
        cancel_message: Message rendered by cancel()
        last_frame: Most recently written frame

    """

    def __init__(self, options: ProgressOptions) -> None:
        """Initialize driver state from ``options``."""
        self.options = options
        self._lock = threading.Lock()
        self._clock = options.clock

        self.start_time: float = self._clock()
        self.last_render_time: float | None = None
        self.min_interval = options.min_interval
        self.description = options.description
        self.output: OutputSink = self._resolve_output(options)

        self.extra_values: ExtraValues = ()
        self.done = False
        self.cancelled = False
        self.cancel_message = options.cancel_message
        self.last_frame: Frame | None = None

    @staticmethod
    def _resolve_output(options: ProgressOptions) -> OutputSink:
        if not options.enabled:
            return NullSink()
        if options.output is not None:
            return options.output
        return default_sink()

    # ------------------------------------------------------------------
    # Capability set, completed by each variant
    # ------------------------------------------------------------------

    def record(self, value: Any = None) -> None:
        """Apply one mutation. Callers go through the driver methods."""
        raise NotImplementedError

    def snapshot(self, now: float | None = None) -> SnapshotBase:
        """Return an immutable view of the progress."""
        raise NotImplementedError

    def _reached_end(self) -> bool:
        """Return True when the last mutation completed the progress."""
        return False

    def _complete(self) -> None:
        """Adjust the state for a finish() call, before the final render."""

    def mark_done(self) -> None:
        """Flag the progress as finished."""
        self.done = True

    def is_done(self) -> bool:
        """Return True once finished or cancelled."""
        return self.done

    def _final_frame_written(self) -> bool:
        return self.last_frame is not None and self.last_frame.final

    def _resolved_extra_values(self) -> tuple[ExtraValue, ...]:
        values = self.extra_values
        if callable(values):
            values = values()
        return tuple(values)

    # ------------------------------------------------------------------
    # Driver surface
    # ------------------------------------------------------------------

    def next(self, values: ExtraValues | None = None) -> None:
        """Advance by one step. Only count-bounded progress supports it.

        Raises:
            TypeError: On threshold and unknown progress

        """
        msg = f"{type(self).__name__} does not support next(); use update()"
        raise TypeError(msg)

    def update(self, value: Any, values: ExtraValues | None = None) -> None:
        """Set the current value and redraw if the throttle allows.

        Args:
            value: New count, measured value or counter
            values: Extra label/value pairs for this render (replaces the
                previous ones; a callable is evaluated only on render)

        """
        self._drive(value, values)

    def finish(self, values: ExtraValues | None = None) -> None:
        """Mark the progress complete and force the final render.

        A second call is a no-op, so the terminal line stays unchanged.
        When the final frame never reached the sink, the call renders it
        again instead.

        Args:
            values: Extra label/value pairs for the final frame

        """
        with self._lock:
            if self.done and (self.cancelled or self._final_frame_written()):
                logger.debug(
                    "finish() on finished progress %r", self.description
                )
                return
            if values is not None:
                self.extra_values = values
            if self.done:
                logger.debug("Retrying final render of %r", self.description)
                self._render_locked(self._clock())
                return
            self._finish_locked()

    def cancel(self, message: str | None = None) -> None:
        """Stop the progress and render a cancellation message.

        Idempotent. An empty message ends the status line without
        printing anything new. A cancelled progress whose message failed
        to render retries the write.

        Args:
            message: Text replacing the status line; defaults to
                ``options.cancel_message``

        """
        with self._lock:
            if self.done and (
                not self.cancelled or self._final_frame_written()
            ):
                logger.debug(
                    "cancel() on finished progress %r", self.description
                )
                return
            if message is not None:
                self.cancel_message = message
            self.cancelled = True
            self.mark_done()
            logger.debug("Progress %r cancelled", self.description)
            self._render_locked(self._clock())

    def __enter__(self) -> Self:
        """Use the progress as a context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Finish on a clean exit, cancel when the block raised.

        A sink failure while cancelling is logged and dropped so the
        exception raised inside the block reaches the caller.
        """
        if exc_type is None:
            self.finish()
            return
        try:
            self.cancel()
        except OSError as e:
            logger.debug(
                "Cancel frame for %r not written: %s", self.description, e
            )

    # ------------------------------------------------------------------
    # Critical sections (lock held)
    # ------------------------------------------------------------------

    def _drive(self, value: Any, values: ExtraValues | None) -> None:
        with self._lock:
            if self.done:
                logger.debug(
                    "Ignoring update on finished progress %r",
                    self.description,
                )
                return

            self.record(value)
            self.extra_values = () if values is None else values

            if self._reached_end():
                self._finish_locked()
                return

            now = self._clock()
            if should_render(now, self.last_render_time, self.min_interval):
                self._render_locked(now)

    def _finish_locked(self) -> None:
        self._complete()
        self.mark_done()
        self._render_locked(self._clock())

    def _render_locked(self, now: float) -> None:
        frame = render(self.snapshot(now))
        self.output.write(frame)
        self.last_frame = frame
        if self.last_render_time is None or now > self.last_render_time:
            self.last_render_time = now
