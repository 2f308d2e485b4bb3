"""
Event model for pan replay.

Four events are derived from every cycle record. Events are immutable.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple

from .cycles import CycleRecord, pan_display_name, scan_out_description


class PanEventType(str, Enum):
    COOK = "cook"
    FILL = "fill"
    START = "start"
    STOP = "stop"


# Chronological order of the events derived from one cycle.
DERIVATION_ORDER = (PanEventType.COOK, PanEventType.FILL, PanEventType.START, PanEventType.STOP)

EventKey = Tuple[str, datetime, str]


@dataclass(frozen=True)
class PanEvent:
    """
    Immutable pan event.

    Fields:
        event_type: One of cook/fill/start/stop
        timestamp: Wall-clock time the event happened
        cycle: Cycle record the event was derived from
    """
    event_type: PanEventType
    timestamp: datetime
    cycle: CycleRecord

    @property
    def protein_pan(self) -> str:
        return self.cycle.protein_pan

    @property
    def key(self) -> EventKey:
        """Identity used to guard against applying an event twice."""
        return (self.event_type.value, self.timestamp, self.cycle.protein_pan)

    def notification_message(self) -> str:
        name = pan_display_name(self.cycle.protein_name, self.cycle.protein_pan)
        if self.event_type is PanEventType.COOK:
            return f"{name} is cooking"
        if self.event_type is PanEventType.FILL:
            return f"{name} finished cooking"
        if self.event_type is PanEventType.START:
            return f"{name} scanned in"
        description = scan_out_description(self.cycle.tzi_target_zone)
        return f"{name} scanned out {description}".rstrip()
