"""
Replay system for deterministic state reconstruction.

StateReconstructor.seek rebuilds the entity registry at any timeline second.
Must be 100% deterministic: same timeline + same target -> same snapshot.
"""

from .handlers import EventSkipped, TransitionTable
from .reconstructor import SeekResult, StateReconstructor

__all__ = [
    "EventSkipped",
    "TransitionTable",
    "SeekResult",
    "StateReconstructor",
]
