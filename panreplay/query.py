"""
Read helpers over replay snapshots.
"""

from typing import Dict, List, Optional

from .core.cycles import PanLocation
from .render.snapshot import MachineView, PanView, ReplaySnapshot


def pans_in(snapshot: ReplaySnapshot, location: PanLocation) -> List[PanView]:
    pans = [p for p in snapshot.pans if p.location == location]
    if location == PanLocation.QUEUE:
        pans.sort(key=lambda p: (p.x, p.protein_pan))
    return pans


def location_counts(snapshot: ReplaySnapshot) -> Dict[str, int]:
    counts = {loc.name.lower(): 0 for loc in PanLocation}
    for p in snapshot.pans:
        counts[p.location.name.lower()] += 1
    return counts


def machine_for(snapshot: ReplaySnapshot, protein_pan: str) -> Optional[MachineView]:
    for m in snapshot.machines:
        if m.cooking_protein == protein_pan:
            return m
    return None


def busy_machines(snapshot: ReplaySnapshot) -> List[MachineView]:
    return [m for m in snapshot.machines if m.cooking]


def expired_pans(snapshot: ReplaySnapshot) -> List[PanView]:
    """Pans in holding whose expire date has passed at the snapshot time."""
    return [p for p in snapshot.pans if p.expired(snapshot.sim_time)]
