"""
Read-only snapshots of the entity registry.

A snapshot is what the renderer receives: resolved pan positions (with any
pending transition target), machine occupancy, notifications, the current
breader and the simulation time. Same state always produces the same bytes
and therefore the same hash.
"""

import hashlib
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Protocol, Tuple

from ..core.canonical import canonical_json_bytes
from ..core.cycles import PanLocation, TargetZone, pan_display_name
from ..core.clock import format_countdown
from ..core.state import EntityRegistry


@dataclass(frozen=True)
class PanView:
    protein_pan: str
    protein_name: str
    location: PanLocation
    expire_date: Optional[datetime]
    start_x: float
    x: float
    y: float
    next_x: Optional[float] = None
    next_y: Optional[float] = None

    @property
    def label(self) -> str:
        return pan_display_name(self.protein_name, self.protein_pan, truncate=True)

    @property
    def in_transition(self) -> bool:
        return self.next_x is not None or self.next_y is not None

    def expired(self, now: datetime) -> bool:
        return (
            self.location == PanLocation.HOLDING
            and self.expire_date is not None
            and now >= self.expire_date
        )

    def countdown(self, now: datetime) -> str:
        """MM:SS until the holding deadline, empty when not in holding."""
        if self.location != PanLocation.HOLDING or self.expire_date is None:
            return ""
        return format_countdown(self.expire_date, now)


@dataclass(frozen=True)
class MachineView:
    index: int
    open_mode: bool
    cooking: bool
    cooking_protein: Optional[str]
    cooking_finish_time: Optional[datetime]
    remaining_seconds: Optional[int]


@dataclass(frozen=True)
class NotificationView:
    message: str
    duration: float
    event_type: str
    protein_pan: str
    timestamp: datetime
    target_zone: TargetZone


@dataclass(frozen=True)
class ReplaySnapshot:
    """
    Immutable view of the replay at one timeline position.

    Fields:
        second: Timeline position
        sim_time: window_start + second
        pans: Pans in registry order
        machines: Exactly six machine slots
        notifications: Active notifications, oldest first
        current_breader: Breader of the most recent scan-in
        progress: Animation progress of pending transitions, 0..1
    """
    second: int
    sim_time: datetime
    pans: Tuple[PanView, ...]
    machines: Tuple[MachineView, ...]
    notifications: Tuple[NotificationView, ...]
    current_breader: Optional[str]
    progress: float = 0.0

    @property
    def transitioning(self) -> bool:
        return any(p.in_transition for p in self.pans)

    def pan(self, protein_pan: str) -> Optional[PanView]:
        for p in self.pans:
            if p.protein_pan == protein_pan:
                return p
        return None

    def with_progress(self, progress: float) -> "ReplaySnapshot":
        return replace(self, progress=max(0.0, min(1.0, progress)))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def state_dict(self) -> Dict[str, Any]:
        """Snapshot contents without the animation progress."""
        data = self.to_dict()
        data.pop("progress", None)
        return data


class Renderer(Protocol):
    """Consumer of snapshots (canvas, terminal, recorder...)."""

    def render(self, snapshot: ReplaySnapshot) -> None:
        ...


class NullRenderer:
    def render(self, snapshot: ReplaySnapshot) -> None:
        return None


def take_snapshot(registry: EntityRegistry, second: int, sim_time: datetime) -> ReplaySnapshot:
    pans = tuple(
        PanView(
            protein_pan=p.protein_pan,
            protein_name=p.protein_name,
            location=p.pan_location,
            expire_date=p.expire_date,
            start_x=p.start_x,
            x=p.x,
            y=p.y,
            next_x=p.next_x,
            next_y=p.next_y,
        )
        for p in registry.pans
    )
    machines = tuple(
        MachineView(
            index=m.index,
            open_mode=m.open_mode,
            cooking=m.cooking,
            cooking_protein=m.cooking_protein,
            cooking_finish_time=m.cooking_finish_time,
            remaining_seconds=(
                int((m.cooking_finish_time - sim_time).total_seconds())
                if m.cooking_finish_time is not None
                else None
            ),
        )
        for m in registry.machines
    )
    notifications = tuple(
        NotificationView(
            message=n.message,
            duration=n.duration,
            event_type=n.event.event_type.value,
            protein_pan=n.event.protein_pan,
            timestamp=n.event.timestamp,
            target_zone=n.event.cycle.tzi_target_zone,
        )
        for n in registry.notifications
    )
    return ReplaySnapshot(
        second=second,
        sim_time=sim_time,
        pans=pans,
        machines=machines,
        notifications=notifications,
        current_breader=registry.current_breader,
    )


def serialize_snapshot(snapshot: ReplaySnapshot) -> bytes:
    return canonical_json_bytes(snapshot.state_dict())


def compute_snapshot_hash(snapshot: ReplaySnapshot) -> str:
    """SHA-256 of the canonical snapshot bytes (progress excluded)."""
    return hashlib.sha256(serialize_snapshot(snapshot)).hexdigest()
