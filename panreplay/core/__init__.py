"""
Core replay primitives.

This module provides the foundational types for deterministic replay:
- CycleRecord: Immutable recorded pan cycle
- PanEvent: One of the four events derived from a cycle
- SimulationClock: Timeline position <-> wall time
- Canonical: Deterministic serialization for snapshot hashing

The mutable entity registry lives in panreplay.core.state.
"""

from .cycles import (
    COOK_SECONDS,
    CycleRecord,
    PanLocation,
    TargetZone,
    cook_seconds,
    is_spicy,
    pan_display_name,
    scan_out_description,
)
from .events import DERIVATION_ORDER, PanEvent, PanEventType
from .clock import SimulationClock, clamp_second, format_countdown
from .canonical import canonicalize, canonical_json_bytes
from .errors import ConfigError, InvalidTransitionError, NoDataError, PanReplayError

__all__ = [
    "COOK_SECONDS",
    "CycleRecord",
    "PanLocation",
    "TargetZone",
    "cook_seconds",
    "is_spicy",
    "pan_display_name",
    "scan_out_description",
    "DERIVATION_ORDER",
    "PanEvent",
    "PanEventType",
    "SimulationClock",
    "clamp_second",
    "format_countdown",
    "canonicalize",
    "canonical_json_bytes",
    "ConfigError",
    "InvalidTransitionError",
    "NoDataError",
    "PanReplayError",
]
