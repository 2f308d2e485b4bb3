"""
Cycle record model.

A cycle record is one completed pan life-cycle (scan-in to scan-out) as
recorded by the line equipment. Records are immutable once parsed.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Dict


class TargetZone(IntEnum):
    """How early/late a scan-out was relative to ideal cook completion."""
    TOO_LITTLE = 0
    SLIGHTLY_TOO_LITTLE = 1
    ON_TARGET = 2
    SLIGHTLY_TOO_MUCH = 3
    TOO_MUCH = 4
    UNKNOWN = 5

    @classmethod
    def parse(cls, value: int) -> "TargetZone":
        if 0 <= value <= 4:
            return cls(value)
        return cls.UNKNOWN


class PanLocation(IntEnum):
    UNKNOWN = 0
    QUEUE = 1
    FUNNEL = 2
    HOLDING = 3


_SCAN_OUT_DESCRIPTIONS = {
    TargetZone.TOO_LITTLE: "Early",
    TargetZone.SLIGHTLY_TOO_LITTLE: "Slightly Early",
    TargetZone.ON_TARGET: "On Time",
    TargetZone.SLIGHTLY_TOO_MUCH: "Slightly Late",
    TargetZone.TOO_MUCH: "Late",
}

# Seconds a pan of each protein spends in a cook machine.
COOK_SECONDS: Dict[str, int] = {
    "filets": 280,
    "spicy": 280,
    "nuggets": 180,
    "spicy strips": 200,
}


@dataclass(frozen=True)
class CycleRecord:
    """
    One completed pan cycle.

    Fields:
        protein_name: Product in the pan (e.g. "nuggets")
        protein_pan: Pan identifier (e.g. "Nuggets 3"), identity of the Pan
        duration: Recorded hold duration in seconds
        start_timestamp: Scan-in time
        stop_timestamp: Scan-out time
        is_long_cycle_error / is_short_cycle_error / is_missed_checkout_error:
            Cycle error flags reported by the line
        tzi_target_zone: Scan-out classification
        breader_id: Breader who produced the pan
    """
    protein_name: str
    protein_pan: str
    duration: int
    start_timestamp: datetime
    stop_timestamp: datetime
    is_long_cycle_error: bool = False
    is_short_cycle_error: bool = False
    is_missed_checkout_error: bool = False
    tzi_target_zone: TargetZone = TargetZone.UNKNOWN
    breader_id: str = ""


def cook_seconds(protein_name: str) -> int:
    """Cook time for a protein; unknown proteins cook for 0 seconds."""
    return COOK_SECONDS.get(protein_name.strip().lower(), 0)


def is_spicy(protein_pan: str) -> bool:
    return "spicy" in protein_pan.lower()


def scan_out_description(zone: TargetZone) -> str:
    return _SCAN_OUT_DESCRIPTIONS.get(zone, "")


def pan_display_name(protein_name: str, protein_pan: str, truncate: bool = False) -> str:
    """
    Short label for a pan: upper-cased protein plus the pan number.

    The pan number is the last whitespace-separated token of the pan id.
    With truncate=True protein names longer than 10 characters are cut
    to 8 characters followed by "...".
    """
    parts = protein_pan.split(" ")
    number = parts[-1]
    name = protein_name.upper()
    if truncate and len(name) > 10:
        name = name[:8] + "..."
    return f"{name} {number}"
