"""Interfaces between the progress core and its collaborators.

The core writes rendered frames to an ``OutputSink`` and never touches a
terminal directly, so callers can swap in a notebook display, a log
collector or a test double::

    class ListSink:
        def __init__(self) -> None:
            self.frames = []

        def write(self, frame: Frame) -> None:
            self.frames.append(frame)

    progress = CountProgress(10, output=ListSink())

``ProgressState`` is the capability set shared by the three progress
variants; iteration helpers and callers can depend on it instead of a
concrete class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tickmeter.core.progress.progress_types import Frame, SnapshotBase


@runtime_checkable
class OutputSink(Protocol):
    """Destination for rendered progress frames.

    ``write`` is called with the progress lock held, one frame at a time.
    It must either display the frame or raise; the caller only advances
    its render clock after ``write`` returns.
    """

    def write(self, frame: Frame) -> None:
        """Display ``frame``, replacing whatever the previous frame showed.

        A frame with ``final`` set is the last one for its progress; sinks
        that overwrite in place should leave it on screen and move on.

        Args:
            frame: Rendered status block

        Raises:
            OSError: If the underlying stream rejects the write

        """
        ...


@runtime_checkable
class ProgressState(Protocol):
    """Capability set shared by count, threshold and unknown progress."""

    def record(self, value: Any = None) -> None:
        """Apply one mutation (increment or absolute value)."""
        ...

    def mark_done(self) -> None:
        """Flag the progress as finished."""
        ...

    def is_done(self) -> bool:
        """Return True once finished or cancelled."""
        ...

    def snapshot(self, now: float | None = None) -> SnapshotBase:
        """Return an immutable view for the renderer."""
        ...


class NullSink:
    """Null object sink that discards every frame.

    Used when a progress is created with ``enabled=False`` so the driver
    never needs to check for a missing sink.
    """

    def write(self, frame: Frame) -> None:
        """Discard ``frame``."""
