"""
Keyframe compiler: cycle records -> dense per-second event timeline.

Every cycle yields four events (cook, fill, start, stop). Each event is
bucketed into the whole second of the simulation window it falls in, so
the state reconstructor can fetch a frame's events by index.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import ReplaySettings
from ..core.clock import SimulationClock, clamp_second
from ..core.cycles import CycleRecord, TargetZone, cook_seconds
from ..core.errors import NoDataError
from ..core.events import PanEvent, PanEventType
from ..logging_config import get_logger

MARKER_COLORS = {
    TargetZone.TOO_LITTLE: "red",
    TargetZone.TOO_MUCH: "red",
    TargetZone.SLIGHTLY_TOO_LITTLE: "yellow",
    TargetZone.SLIGHTLY_TOO_MUCH: "yellow",
    TargetZone.ON_TARGET: "green",
}


@dataclass
class Keyframe:
    events: List[PanEvent] = field(default_factory=list)


@dataclass(frozen=True)
class TimelineMarker:
    """Scan-out marker shown on the scrubber, colored by target zone."""
    second: int
    color: str
    cycle: CycleRecord


@dataclass(frozen=True)
class SkippedCycle:
    cycle: CycleRecord
    reason: str


@dataclass(frozen=True)
class Timeline:
    """
    Compiled timeline for one dataset.

    Fields:
        window_start: Wall time of position 0
        window_end: Wall time of the end of the window
        keyframes: One Keyframe per whole second, index 0 = window_start
        markers: Scan-out markers for cycles with a known target zone
        skipped_cycles: Cycles whose events fell outside the window
    """
    window_start: datetime
    window_end: datetime
    keyframes: Tuple[Keyframe, ...]
    markers: Tuple[TimelineMarker, ...] = ()
    skipped_cycles: Tuple[SkippedCycle, ...] = ()

    @property
    def duration_seconds(self) -> int:
        return len(self.keyframes)

    @property
    def last_second(self) -> int:
        return max(0, self.duration_seconds - 1)

    @property
    def clock(self) -> SimulationClock:
        return SimulationClock(self.window_start)

    @property
    def event_count(self) -> int:
        return sum(len(k.events) for k in self.keyframes)

    def events_at(self, second: int) -> List[PanEvent]:
        if 0 <= second < len(self.keyframes):
            return self.keyframes[second].events
        return []

    def clamp(self, second: float) -> int:
        """Clamp a (possibly fractional) position into [0, duration - 1]."""
        return clamp_second(second, self.last_second)

    def time_at(self, second: float) -> datetime:
        return self.clock.at(second)

    def second_at(self, when: datetime) -> int:
        return self.clamp(self.clock.offset(when))

    def event_counts(self) -> Dict[str, int]:
        counts = {t.value: 0 for t in PanEventType}
        for k in self.keyframes:
            for ev in k.events:
                counts[ev.event_type.value] += 1
        return counts


def derive_events(cycle: CycleRecord, fill_lead_seconds: int = 10) -> List[PanEvent]:
    """
    Derive the four events of a cycle, in chronological order.

    cook = start - (cook time + fill lead), fill = start - fill lead,
    start = start_timestamp, stop = stop_timestamp.
    """
    lead = timedelta(seconds=fill_lead_seconds)
    cook_at = cycle.start_timestamp - timedelta(seconds=cook_seconds(cycle.protein_name)) - lead
    return [
        PanEvent(PanEventType.COOK, cook_at, cycle),
        PanEvent(PanEventType.FILL, cycle.start_timestamp - lead, cycle),
        PanEvent(PanEventType.START, cycle.start_timestamp, cycle),
        PanEvent(PanEventType.STOP, cycle.stop_timestamp, cycle),
    ]


def compute_window(
    cycles: Sequence[CycleRecord], settings: ReplaySettings
) -> Tuple[datetime, datetime]:
    """
    Simulation window padded on both sides.

    The window opens `window_padding_seconds` before the earliest derived
    event (a cook event precedes its cycle's start) and closes the same
    padding after the latest stop_timestamp.
    """
    padding = timedelta(seconds=settings.window_padding_seconds)
    # cook is the earliest event derived from a cycle's start
    earliest = min(derive_events(cycle, settings.fill_lead_seconds)[0].timestamp for cycle in cycles)
    latest = max(cycle.stop_timestamp for cycle in cycles)
    return earliest - padding, latest + padding


def _marker_for(cycle: CycleRecord, clock: SimulationClock) -> Optional[TimelineMarker]:
    color = MARKER_COLORS.get(cycle.tzi_target_zone)
    if color is None:
        return None
    return TimelineMarker(second=clock.bucket(cycle.stop_timestamp), color=color, cycle=cycle)


def compile_timeline(
    cycles: Sequence[CycleRecord], settings: Optional[ReplaySettings] = None
) -> Timeline:
    """
    Compile cycle records into a per-second keyframe timeline.

    Args:
        cycles: Normalized cycle records
        settings: Replay settings (padding, fill lead)

    Returns:
        Timeline whose keyframes hold 4 events per accepted cycle

    Raises:
        NoDataError: If cycles is empty
    """
    if not cycles:
        raise NoDataError("No cycle records to compile")
    settings = settings or ReplaySettings()
    logger = get_logger(__name__)

    window_start, window_end = compute_window(cycles, settings)
    clock = SimulationClock(window_start)
    total = int((window_end - window_start).total_seconds() // 1)
    # with little or no padding the latest stop can round onto index `total`
    latest_stop = max(cycle.stop_timestamp for cycle in cycles)
    total = max(total, clock.bucket(latest_stop) + 1)
    keyframes = [Keyframe() for _ in range(total)]

    markers: List[TimelineMarker] = []
    skipped: List[SkippedCycle] = []

    for cycle in cycles:
        events = derive_events(cycle, settings.fill_lead_seconds)
        indices = [clock.bucket(ev.timestamp) for ev in events]
        bad = [i for i in indices if not 0 <= i < total]
        if bad:
            reason = f"event index {bad[0]} outside window [0, {total})"
            logger.warning(f"Skipping cycle {cycle.protein_pan} @ {cycle.start_timestamp}: {reason}")
            skipped.append(SkippedCycle(cycle=cycle, reason=reason))
            continue
        for ev, idx in zip(events, indices):
            keyframes[idx].events.append(ev)
        marker = _marker_for(cycle, clock)
        if marker is not None:
            markers.append(marker)

    timeline = Timeline(
        window_start=window_start,
        window_end=window_end,
        keyframes=tuple(keyframes),
        markers=tuple(markers),
        skipped_cycles=tuple(skipped),
    )
    logger.info(
        f"Compiled timeline: {timeline.duration_seconds}s window, "
        f"{timeline.event_count} events, {len(skipped)} cycles skipped"
    )
    return timeline
