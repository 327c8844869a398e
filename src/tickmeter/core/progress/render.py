"""Turn progress snapshots into frames.

Pure functions: a snapshot goes in, a ``Frame`` comes out. Nothing here
reads the clock or touches a stream.

Line formats::

    Progress:  25%|█████▏              |  ETA: 0:00:30
    Progress: 100%|████████████████████|  Time: 0:00:40
    Progress: (thresh = 1e-05, value = 0.001)  Time: 0:00:02
    Progress: Time: 0:00:03 (3 iterations)
    Progress: 4096  Time: 0:00:12
      loss: 0.25
"""

from __future__ import annotations

from typing import Any

from tickmeter.constants import ETA_UNKNOWN
from tickmeter.utils.progress_utils import (
    estimate_eta,
    format_duration,
    format_eta,
    format_percentage,
    format_speed,
    render_bar,
)

from .progress_types import (
    CountSnapshot,
    ExtraValue,
    Frame,
    SnapshotBase,
    ThresholdSnapshot,
    UnknownSnapshot,
)

_JSON_SCALARS = (str, int, float, bool, type(None))


def count_fraction(total: int, current: int) -> float:
    """Completion of a count-bounded progress, clamped to [0, 1].

    A zero total counts as complete.
    """
    if total <= 0:
        return 1.0
    return max(0.0, min(current / total, 1.0))


def format_extra_lines(values: tuple[ExtraValue, ...]) -> list[str]:
    """Render ``(label, value)`` pairs as indented ``label: value`` lines."""
    return [f"  {label}: {value}" for label, value in values]


def render_count_line(snapshot: CountSnapshot) -> str:
    """Status line of a count-bounded progress."""
    fraction = count_fraction(snapshot.total, snapshot.current)
    percent = format_percentage(fraction)
    bar = render_bar(fraction, snapshot.bar_length, snapshot.glyphs)

    if snapshot.done:
        tail = f"  Time: {format_duration(snapshot.elapsed)}"
    else:
        eta = estimate_eta(snapshot.elapsed, snapshot.current, snapshot.total)
        tail = f"  ETA: {format_eta(eta)}"

    if snapshot.show_speed:
        per_item = (
            snapshot.elapsed / snapshot.current
            if snapshot.current > 0
            else None
        )
        tail += f" ({format_speed(per_item)})"

    return f"{snapshot.description}{percent}{bar}{tail}"


def render_threshold_line(snapshot: ThresholdSnapshot) -> str:
    """Status line of a threshold-bounded progress."""
    elapsed = format_duration(snapshot.elapsed)
    if snapshot.done:
        return (
            f"{snapshot.description}Time: {elapsed} "
            f"({snapshot.iterations} iterations)"
        )

    value = (
        ETA_UNKNOWN
        if snapshot.current_value is None
        else f"{snapshot.current_value:g}"
    )
    return (
        f"{snapshot.description}(thresh = {snapshot.threshold:g}, "
        f"value = {value})  Time: {elapsed}"
    )


def render_unknown_line(snapshot: UnknownSnapshot) -> str:
    """Status line of an unbounded progress."""
    elapsed = format_duration(snapshot.elapsed)
    return f"{snapshot.description}{snapshot.counter}  Time: {elapsed}"


def _json_value(value: Any) -> Any:
    return value if isinstance(value, _JSON_SCALARS) else str(value)


def snapshot_fields(snapshot: SnapshotBase) -> dict[str, Any]:
    """Plain data describing ``snapshot`` for structured sinks.

    Extra values that are not JSON scalars are converted with ``str``.
    """
    fields: dict[str, Any] = {
        "description": snapshot.description.strip(),
        "elapsed": round(snapshot.elapsed, 3),
        "done": snapshot.done,
        "cancelled": snapshot.cancelled,
        "values": {
            str(label): _json_value(value)
            for label, value in snapshot.extra_values
        },
    }

    if isinstance(snapshot, CountSnapshot):
        fraction = count_fraction(snapshot.total, snapshot.current)
        eta = estimate_eta(snapshot.elapsed, snapshot.current, snapshot.total)
        fields.update(
            kind="count",
            total=snapshot.total,
            current=snapshot.current,
            fraction=round(fraction, 4),
            eta=None if eta is None else round(eta, 3),
        )
    elif isinstance(snapshot, ThresholdSnapshot):
        fields.update(
            kind="threshold",
            threshold=snapshot.threshold,
            comparator=snapshot.comparator.value,
            value=snapshot.current_value,
            iterations=snapshot.iterations,
        )
    elif isinstance(snapshot, UnknownSnapshot):
        fields.update(kind="unknown", counter=snapshot.counter)

    return fields


def render(snapshot: SnapshotBase) -> Frame:
    """Render ``snapshot`` into a frame.

    A cancelled snapshot renders as its cancel message alone (no lines for
    an empty message), in the cancel colour.

    Args:
        snapshot: Immutable progress view

    Returns:
        The frame to hand to an output sink

    Raises:
        TypeError: For an unknown snapshot type

    """
    fields = snapshot_fields(snapshot)

    if snapshot.cancelled:
        lines = (snapshot.cancel_message,) if snapshot.cancel_message else ()
        return Frame(
            lines=lines,
            color=snapshot.cancel_color,
            final=True,
            fields={**fields, "message": snapshot.cancel_message},
        )

    if isinstance(snapshot, CountSnapshot):
        status = render_count_line(snapshot)
    elif isinstance(snapshot, ThresholdSnapshot):
        status = render_threshold_line(snapshot)
    elif isinstance(snapshot, UnknownSnapshot):
        status = render_unknown_line(snapshot)
    else:
        msg = f"Cannot render {type(snapshot).__name__}"
        raise TypeError(msg)

    return Frame(
        lines=(status, *format_extra_lines(snapshot.extra_values)),
        color=snapshot.color,
        final=snapshot.done,
        fields=fields,
    )
