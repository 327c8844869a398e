"""Redraw throttle for progress states."""

from __future__ import annotations


def should_render(
    now: float,
    last_render_time: float | None,
    min_interval: float,
    *,
    force: bool = False,
) -> bool:
    """Decide whether a progress line is due for a redraw.

    A state that has never rendered (``last_render_time is None``) always
    renders, as does any forced attempt. Otherwise at least
    ``min_interval`` seconds must separate two renders, so
    ``min_interval == 0`` renders on every call.

    Args:
        now: Current monotonic time in seconds
        last_render_time: Time of the previous successful render
        min_interval: Minimum seconds between renders
        force: Render regardless of timing (finish/cancel)

    Returns:
        True when the caller should render now

    """
    if force or last_render_time is None:
        return True
    return now - last_render_time >= min_interval
