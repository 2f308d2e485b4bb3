"""
Shared builders for test datasets.
"""

from datetime import datetime, timedelta
from typing import Dict, List

from panreplay.core.cycles import CycleRecord, TargetZone
from panreplay.ingest.normalize import Dataset

T0 = datetime(2024, 5, 1, 11, 0, 0)


def make_cycle(
    pan: str,
    protein: str,
    start_offset: float = 0.0,
    hold: float = 300.0,
    zone: TargetZone = TargetZone.ON_TARGET,
    breader: str = "B1",
) -> CycleRecord:
    start = T0 + timedelta(seconds=start_offset)
    return CycleRecord(
        protein_name=protein,
        protein_pan=pan,
        duration=int(hold),
        start_timestamp=start,
        stop_timestamp=start + timedelta(seconds=hold),
        tzi_target_zone=zone,
        breader_id=breader,
    )


def make_dataset(cycles: List[CycleRecord], location_id: str = "store-1") -> Dataset:
    ordered = tuple(sorted(cycles, key=lambda c: c.start_timestamp))
    return Dataset(location_id=location_id, date=ordered[0].start_timestamp, cycles=ordered)


def make_row(
    pan: str = "Nuggets 1",
    protein: str = "nuggets",
    start: str = "2024-05-01 11:00:00",
    stop: str = "2024-05-01 11:05:00",
    zone: str = "2",
    breader: str = "B1",
    **extra: str,
) -> Dict[str, str]:
    row = {
        "location_id": "store-1",
        "start_timestamp": start,
        "stop_timestamp": stop,
        "protein_name": protein,
        "protein_pan": pan,
        "duration": "300",
        "is_long_cycle_error": "false",
        "is_short_cycle_error": "false",
        "is_missed_checkout_error": "false",
        "tzi_target_zone": zone,
        "breader_id": breader,
    }
    row.update(extra)
    return row


def busy_line() -> List[CycleRecord]:
    """A dozen overlapping cycles across spicy and regular pans."""
    return [
        make_cycle("Filets 1", "filets", 0, 420, TargetZone.ON_TARGET, "B1"),
        make_cycle("Spicy 1", "spicy", 30, 600, TargetZone.TOO_MUCH, "B2"),
        make_cycle("Nuggets 1", "nuggets", 45, 240, TargetZone.SLIGHTLY_TOO_LITTLE, "B1"),
        make_cycle("Spicy Strips 1", "spicy strips", 90, 360, TargetZone.ON_TARGET, "B3"),
        make_cycle("Filets 2", "filets", 200, 500, TargetZone.SLIGHTLY_TOO_MUCH, "B2"),
        make_cycle("Nuggets 2", "nuggets", 260, 300, TargetZone.TOO_LITTLE, "B1"),
        make_cycle("Filets 1", "filets", 700, 300, TargetZone.ON_TARGET, "B3"),
        make_cycle("Spicy 2", "spicy", 710, 280, TargetZone.ON_TARGET, "B2"),
        make_cycle("Nuggets 1", "nuggets", 720, 200, TargetZone.UNKNOWN, "B1"),
        make_cycle("Spicy 1", "spicy", 900, 330, TargetZone.ON_TARGET, "B3"),
        make_cycle("Filets 3", "filets", 905, 260, TargetZone.TOO_MUCH, "B1"),
        make_cycle("Spicy Strips 1", "spicy strips", 1000, 250, TargetZone.ON_TARGET, "B2"),
    ]

