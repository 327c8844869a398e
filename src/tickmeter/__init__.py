"""Thread-safe terminal progress meters.

    >>> from tickmeter import CountProgress
    >>> progress = CountProgress(100, description="Training: ")
    >>> for _ in range(100):
    ...     progress.next()
"""

from importlib.metadata import PackageNotFoundError, version

from tickmeter.core.progress import (
    AppendLineSink,
    BarGlyphs,
    ClearAllSink,
    Comparator,
    CountProgress,
    Frame,
    JsonLinesSink,
    OverwriteLineSink,
    ProgressOptions,
    ThresholdProgress,
    UnknownProgress,
    default_sink,
    parse_glyphs,
)
from tickmeter.exceptions import (
    GlyphSpecError,
    ProgressConfigError,
    SettingsError,
    TickmeterError,
)
from tickmeter.logger import setup_logging
from tickmeter.utils.iteration import (
    atrack,
    gather_with_progress,
    progress_map,
    progress_pmap,
    track,
)

try:
    __version__ = version("tickmeter")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"

__all__ = [
    "AppendLineSink",
    "BarGlyphs",
    "ClearAllSink",
    "Comparator",
    "CountProgress",
    "Frame",
    "GlyphSpecError",
    "JsonLinesSink",
    "OverwriteLineSink",
    "ProgressConfigError",
    "ProgressOptions",
    "SettingsError",
    "ThresholdProgress",
    "TickmeterError",
    "UnknownProgress",
    "__version__",
    "atrack",
    "default_sink",
    "gather_with_progress",
    "parse_glyphs",
    "progress_map",
    "progress_pmap",
    "setup_logging",
    "track",
]
