"""
Timeline compilation.

compile_timeline turns cycle records into a dense per-second keyframe array.
"""

from .keyframes import (
    Keyframe,
    SkippedCycle,
    Timeline,
    TimelineMarker,
    compile_timeline,
    compute_window,
    derive_events,
)

__all__ = [
    "Keyframe",
    "SkippedCycle",
    "Timeline",
    "TimelineMarker",
    "compile_timeline",
    "compute_window",
    "derive_events",
]
