"""
Entity registry: the mutable derived world state of a replay.

The registry holds pans, the six cook machines, active notifications, the
executed-event set and the current breader. It has no behaviour beyond
initialization and small bookkeeping helpers; the state reconstructor is
its only writer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from ..config import ReplaySettings
from .cycles import CycleRecord, PanLocation, is_spicy
from .events import EventKey, PanEvent

MACHINE_COUNT = 6

PAN_WIDTH = 80
PAN_SPACING = 10
QUEUE_ORIGIN_X = 10

QUEUE_Y = 150
FUNNEL_Y = 250
HOLDING_Y = 300


def slot_x(index: int) -> float:
    """Horizontal position of queue slot `index`."""
    return float(QUEUE_ORIGIN_X + index * (PAN_WIDTH + PAN_SPACING))


@dataclass
class Pan:
    """
    A physical pan tracked through the line.

    Fields:
        protein_pan: Pan identifier
        protein_name: Product the pan carries
        pan_location: Current location state
        expire_date: Holding deadline, set when the pan is scanned in
        start_x: Home queue slot position
        x, y: Committed (rest) position
        next_x, next_y: Pending transition target, None when at rest
    """
    protein_pan: str
    protein_name: str
    pan_location: PanLocation = PanLocation.UNKNOWN
    expire_date: Optional[datetime] = None
    start_x: float = 0.0
    x: float = 0.0
    y: float = 0.0
    next_x: Optional[float] = None
    next_y: Optional[float] = None

    @property
    def spicy(self) -> bool:
        return is_spicy(self.protein_pan)

    @property
    def in_transition(self) -> bool:
        return self.next_x is not None or self.next_y is not None

    @property
    def effective_x(self) -> float:
        return self.next_x if self.next_x is not None else self.x

    def move_to(self, x: float, y: float) -> None:
        self.next_x = x
        self.next_y = y

    def commit(self) -> None:
        if self.next_x is not None:
            self.x = self.next_x
        if self.next_y is not None:
            self.y = self.next_y
        self.next_x = None
        self.next_y = None


@dataclass
class Machine:
    """
    One cook-machine slot.

    open_mode is fixed per slot: True serves spicy pans, False the rest.
    """
    index: int
    open_mode: bool
    cooking: bool = False
    cooking_protein: Optional[str] = None
    cooking_finish_time: Optional[datetime] = None

    def assign(self, protein_pan: str, finish_time: datetime) -> None:
        self.cooking = True
        self.cooking_protein = protein_pan
        self.cooking_finish_time = finish_time

    def release(self) -> None:
        self.cooking = False
        self.cooking_protein = None
        self.cooking_finish_time = None


@dataclass
class Notification:
    message: str
    duration: float  # frames left on screen
    event: PanEvent


@dataclass(frozen=True)
class Diagnostic:
    """Recoverable replay problem: the event was skipped, replay continued."""
    second: int
    reason: str
    event_type: str
    protein_pan: str
    detail: str = ""


@dataclass
class EntityRegistry:
    """
    Mutable replay state for one loaded dataset.

    Usage:
        registry = EntityRegistry.from_cycles(dataset.cycles, settings)
        registry.reset_all()
    """
    settings: ReplaySettings
    catalog: Dict[str, str] = field(default_factory=dict)  # pan id -> protein name

    pans: List[Pan] = field(default_factory=list)
    machines: List[Machine] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    executed: Set[EventKey] = field(default_factory=set)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    current_breader: Optional[str] = None

    _by_id: Dict[str, Pan] = field(default_factory=dict, repr=False)

    @classmethod
    def from_cycles(cls, cycles: Iterable[CycleRecord], settings: ReplaySettings) -> "EntityRegistry":
        catalog: Dict[str, str] = {}
        for cycle in cycles:
            catalog.setdefault(cycle.protein_pan, cycle.protein_name)
        registry = cls(settings=settings, catalog=catalog)
        registry.reset_all()
        return registry

    def _pan_sort_key(self, pan_id: str):
        if self.settings.spicy_left_side:
            return (0 if is_spicy(pan_id) else 1, pan_id)
        return (0, pan_id)

    def reset_all(self) -> None:
        """Rebuild pans and machines and clear every replay-derived record."""
        ordered = sorted(self.catalog, key=self._pan_sort_key)
        self.pans = []
        for index, pan_id in enumerate(ordered):
            home = slot_x(index)
            self.pans.append(
                Pan(
                    protein_pan=pan_id,
                    protein_name=self.catalog[pan_id],
                    pan_location=PanLocation.QUEUE,
                    start_x=home,
                    x=home,
                    y=float(QUEUE_Y),
                )
            )
        self._by_id = {p.protein_pan: p for p in self.pans}

        half = MACHINE_COUNT // 2
        left_spicy = self.settings.spicy_left_side
        self.machines = [
            Machine(index=i, open_mode=(i < half) == left_spicy)
            for i in range(MACHINE_COUNT)
        ]

        self.notifications = []
        self.executed = set()
        self.diagnostics = []
        self.current_breader = None

    def find_pan(self, protein_pan: str) -> Optional[Pan]:
        return self._by_id.get(protein_pan)

    def machine_for(self, protein_pan: str) -> Optional[Machine]:
        for machine in self.machines:
            if machine.cooking_protein == protein_pan:
                return machine
        return None

    def free_machine(self, spicy: bool) -> Optional[Machine]:
        for machine in self.machines:
            if not machine.cooking and machine.open_mode == spicy:
                return machine
        return None

    def queued_pans(self) -> List[Pan]:
        """Queue pans ordered front to back (by effective x, then id)."""
        queued = [p for p in self.pans if p.pan_location == PanLocation.QUEUE]
        return sorted(queued, key=lambda p: (p.effective_x, p.protein_pan))

    def commit_transitions(self) -> None:
        for pan in self.pans:
            pan.commit()

    def notify(self, event: PanEvent) -> None:
        key = event.key
        if any(n.event.key == key for n in self.notifications):
            return
        self.notifications.append(
            Notification(
                message=event.notification_message(),
                duration=float(self.settings.notification_frames),
                event=event,
            )
        )

    def tick_notifications(self) -> None:
        for n in self.notifications:
            n.duration -= 1
        self.notifications = [n for n in self.notifications if n.duration > 0]
