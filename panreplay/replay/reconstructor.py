"""
State reconstructor: rebuild the entity registry at any timeline second.

Forward seeks continue from the last reconstructed second; backward seeks
reset the registry and replay from zero. Frames before the target are fully
resolved (transitions committed, notifications aged); the target frame's
events are applied but left in transition so the renderer can animate them.

The executed-event set makes seeks over overlapping ranges safe: an event
is processed at most once between two resets.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.events import PanEvent
from ..core.state import Diagnostic, EntityRegistry
from ..logging_config import get_logger
from ..metrics import track_event_applied, track_event_skipped, track_rebuild, track_seek
from ..render.animation import FrameScheduler, TransitionAnimation
from ..render.snapshot import NullRenderer, Renderer, ReplaySnapshot, take_snapshot
from ..timeline.keyframes import Timeline
from .handlers import EventSkipped, TransitionTable


@dataclass(frozen=True)
class SeekResult:
    """
    Outcome of one seek.

    Fields:
        second: Timeline position reached (after clamping)
        applied: Events applied by this seek
        skipped: Events skipped by this seek (recoverable errors)
        rebuilt: True if the registry was reset and replayed from zero
        snapshot: Registry snapshot at `second`
    """
    second: int
    applied: int
    skipped: int
    rebuilt: bool
    snapshot: ReplaySnapshot


class StateReconstructor:
    """
    Deterministic replay of a timeline onto an entity registry.

    Usage:
        reconstructor = StateReconstructor(timeline, registry, renderer=my_renderer)
        result = reconstructor.seek(3600)
    """

    def __init__(
        self,
        timeline: Timeline,
        registry: EntityRegistry,
        renderer: Optional[Renderer] = None,
        scheduler: Optional[FrameScheduler] = None,
        transitions: Optional[TransitionTable] = None,
        trace_id: Optional[str] = None,
        animation_clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeline = timeline
        self.registry = registry
        self.renderer = renderer or NullRenderer()
        self.scheduler = scheduler
        self.transitions = transitions or TransitionTable.default()
        self.animation_clock = animation_clock
        self.current_second = 0
        self._animation: Optional[TransitionAnimation] = None
        self.logger = get_logger(__name__, trace_id=trace_id)

    @property
    def animating(self) -> bool:
        return self._animation is not None and not (self._animation.finished or self._animation.cancelled)

    def cancel_animation(self) -> None:
        if self._animation is not None:
            self._animation.cancel()
            self._animation = None

    def reset(self) -> None:
        self.cancel_animation()
        self.registry.reset_all()
        self.current_second = 0

    def snapshot(self) -> ReplaySnapshot:
        second = self.current_second
        return take_snapshot(self.registry, second, self.timeline.time_at(second))

    def seek(self, target: float) -> SeekResult:
        """
        Reconstruct state at `target` and hand a snapshot to the renderer.

        Args:
            target: Timeline second; clamped to [0, duration - 1], floored

        Returns:
            SeekResult with counts and the snapshot at the target
        """
        with track_seek():
            self.cancel_animation()
            second = self.timeline.clamp(target)

            rebuilt = second < self.current_second
            if rebuilt:
                self.registry.reset_all()
                track_rebuild()
                start = 0
            else:
                start = self.current_second

            applied = skipped = 0
            for i in range(start, second):
                a, s = self._apply_frame(i)
                applied += a
                skipped += s
                self.registry.commit_transitions()
                self.registry.tick_notifications()

            a, s = self._apply_frame(second)
            applied += a
            skipped += s
            self.current_second = second

            snapshot = self.snapshot()

        self.logger.debug(
            f"Seek to {second} ({'rebuild' if rebuilt else f'from {start}'}): "
            f"{applied} applied, {skipped} skipped"
        )
        self._render(snapshot, has_events=bool(self.timeline.events_at(second)))
        return SeekResult(
            second=second,
            applied=applied,
            skipped=skipped,
            rebuilt=rebuilt,
            snapshot=snapshot,
        )

    def _apply_frame(self, second: int):
        applied = skipped = 0
        for event in self.timeline.events_at(second):
            if event.key in self.registry.executed:
                continue
            self.registry.executed.add(event.key)
            if self._apply_event(event, second):
                applied += 1
            else:
                skipped += 1
        return applied, skipped

    def _apply_event(self, event: PanEvent, second: int) -> bool:
        try:
            self.transitions.apply(self.registry, event)
        except EventSkipped as e:
            self.registry.diagnostics.append(
                Diagnostic(
                    second=second,
                    reason=e.reason,
                    event_type=event.event_type.value,
                    protein_pan=event.protein_pan,
                    detail=e.detail,
                )
            )
            track_event_skipped(e.reason)
            self.logger.warning(
                f"Skipped {event.event_type.value} event for {event.protein_pan} at second {second}: {e}",
                extra={"second": second, "protein_pan": event.protein_pan, "reason": e.reason},
            )
            return False

        self.registry.notify(event)
        track_event_applied(event.event_type.value)
        return True

    def _render(self, snapshot: ReplaySnapshot, has_events: bool) -> None:
        if not has_events or not snapshot.transitioning:
            self.renderer.render(snapshot)
            return
        if self.scheduler is None:
            self.renderer.render(snapshot.with_progress(1.0))
            return
        self._animation = TransitionAnimation(
            snapshot,
            self.renderer,
            self.scheduler,
            duration=self.registry.settings.animation_seconds,
            clock=self.animation_clock,
        )
        self._animation.start()
