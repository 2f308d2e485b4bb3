"""
Renderer-facing output: snapshots, hashing and transition animation.
"""

from .snapshot import (
    MachineView,
    NotificationView,
    NullRenderer,
    PanView,
    Renderer,
    ReplaySnapshot,
    compute_snapshot_hash,
    serialize_snapshot,
    take_snapshot,
)
from .animation import (
    FrameScheduler,
    ManualFrameScheduler,
    TransitionAnimation,
    ease_in_out_cubic,
    interpolate,
    pan_position,
)

__all__ = [
    "MachineView",
    "NotificationView",
    "NullRenderer",
    "PanView",
    "Renderer",
    "ReplaySnapshot",
    "compute_snapshot_hash",
    "serialize_snapshot",
    "take_snapshot",
    "FrameScheduler",
    "ManualFrameScheduler",
    "TransitionAnimation",
    "ease_in_out_cubic",
    "interpolate",
    "pan_position",
]
