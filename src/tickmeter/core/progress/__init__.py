"""Progress module for tickmeter.

This module contains the progress state variants, the renderer that turns
their snapshots into frames, and the sinks that put frames on a terminal.
"""

from tickmeter.core.progress.glyphs import (
    BarGlyphs,
    default_glyphs,
    parse_glyphs,
)
from tickmeter.core.progress.options import ProgressOptions
from tickmeter.core.progress.output import (
    AppendLineSink,
    ClearAllSink,
    JsonLinesSink,
    OverwriteLineSink,
    default_sink,
    is_interactive,
)
from tickmeter.core.progress.progress_types import (
    Comparator,
    CountSnapshot,
    Frame,
    ThresholdSnapshot,
    UnknownSnapshot,
)
from tickmeter.core.progress.render import render
from tickmeter.core.progress.state import (
    CountProgress,
    ThresholdProgress,
    UnknownProgress,
)
from tickmeter.core.progress.throttle import should_render

__all__ = [
    "AppendLineSink",
    "BarGlyphs",
    "ClearAllSink",
    "Comparator",
    "CountProgress",
    "CountSnapshot",
    "Frame",
    "JsonLinesSink",
    "OverwriteLineSink",
    "ProgressOptions",
    "ThresholdProgress",
    "ThresholdSnapshot",
    "UnknownProgress",
    "UnknownSnapshot",
    "default_glyphs",
    "default_sink",
    "is_interactive",
    "parse_glyphs",
    "render",
    "should_render",
]
