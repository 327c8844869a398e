"""Protocol interfaces for the progress core."""

from tickmeter.core.protocols.progress import (
    NullSink,
    OutputSink,
    ProgressState,
)

__all__ = [
    "NullSink",
    "OutputSink",
    "ProgressState",
]
