"""
Transition animation on a cooperative frame scheduler.

When a seek lands on a frame that moved pans, the renderer animates them
from their rest position to the pending target over a short duration. The
animation is a chain of per-refresh callbacks that a new seek cancels.
"""

import itertools
import time
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from .snapshot import PanView, Renderer, ReplaySnapshot

FrameCallback = Callable[[], None]


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return 1 - ((-2 * t + 2) ** 3) / 2


def interpolate(start: float, end: float, fraction: float) -> float:
    return start + (end - start) * ease_in_out_cubic(fraction)


def pan_position(pan: PanView, progress: float) -> Tuple[float, float]:
    """Drawn position of a pan at animation `progress` (0..1)."""
    if not pan.in_transition:
        return pan.x, pan.y
    nx = pan.next_x if pan.next_x is not None else pan.x
    ny = pan.next_y if pan.next_y is not None else pan.y
    return interpolate(pan.x, nx, progress), interpolate(pan.y, ny, progress)


class FrameScheduler(Protocol):
    """Schedules a callback for the next display refresh."""

    def request(self, callback: FrameCallback) -> int:
        ...

    def cancel(self, handle: int) -> None:
        ...


class ManualFrameScheduler:
    """
    Frame scheduler driven explicitly by the caller.

    Usage:
        scheduler = ManualFrameScheduler()
        ...
        scheduler.run_pending()   # one display refresh
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_pending(self) -> int:
        """Run callbacks queued before this refresh; returns how many ran."""
        batch: List[FrameCallback] = list(self._pending.values())
        self._pending.clear()
        for callback in batch:
            callback()
        return len(batch)


class TransitionAnimation:
    """
    Renders a snapshot repeatedly with progress rising from 0 to 1.

    Fields:
        snapshot: Snapshot with pending transitions
        renderer: Receives each interpolated frame
        scheduler: Provides per-refresh callbacks
        duration: Animation length in seconds
        clock: Monotonic time source
    """

    def __init__(
        self,
        snapshot: ReplaySnapshot,
        renderer: Renderer,
        scheduler: FrameScheduler,
        duration: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.snapshot = snapshot
        self.renderer = renderer
        self.scheduler = scheduler
        self.duration = duration
        self.clock = clock
        self.started_at: Optional[float] = None
        self.handle: Optional[int] = None
        self.finished = False
        self.cancelled = False

    def start(self) -> None:
        self.started_at = self.clock()
        self._step()

    def cancel(self) -> None:
        if self.handle is not None:
            self.scheduler.cancel(self.handle)
            self.handle = None
        self.cancelled = True

    def progress(self) -> float:
        if self.started_at is None:
            return 0.0
        if self.duration <= 0:
            return 1.0
        return min((self.clock() - self.started_at) / self.duration, 1.0)

    def _step(self) -> None:
        self.handle = None
        if self.cancelled:
            return
        t = self.progress()
        self.renderer.render(self.snapshot.with_progress(t))
        if t < 1.0:
            self.handle = self.scheduler.request(self._step)
        else:
            self.finished = True
