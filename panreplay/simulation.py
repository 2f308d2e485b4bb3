"""
Simulation engine: one loaded dataset, its timeline and the reconstructor.

Usage:
    engine = SimulationEngine.from_csv("cycles.csv")
    result = engine.seek(1800)
    print(result.snapshot.current_breader)
"""

from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from .config import ReplaySettings
from .core.state import Diagnostic, EntityRegistry
from .ingest.csv_source import read_rows
from .ingest.normalize import Dataset, normalize_rows
from .logging_config import get_logger
from .render.animation import FrameScheduler
from .render.snapshot import Renderer, ReplaySnapshot
from .replay.reconstructor import SeekResult, StateReconstructor
from .timeline.keyframes import Timeline, compile_timeline


class SimulationEngine:
    """
    Facade over Dataset (immutable), Timeline (immutable) and the
    StateReconstructor that owns the mutable EntityRegistry.
    """

    def __init__(
        self,
        dataset: Dataset,
        settings: Optional[ReplaySettings] = None,
        renderer: Optional[Renderer] = None,
        scheduler: Optional[FrameScheduler] = None,
    ) -> None:
        self.dataset = dataset
        self.settings = settings or ReplaySettings()
        self.timeline: Timeline = compile_timeline(dataset.cycles, self.settings)
        self.registry = EntityRegistry.from_cycles(dataset.cycles, self.settings)
        self.reconstructor = StateReconstructor(
            self.timeline,
            self.registry,
            renderer=renderer,
            scheduler=scheduler,
            trace_id=dataset.location_id or None,
        )
        get_logger(__name__, trace_id=dataset.location_id or None).info(
            f"Engine ready: {len(self.registry.pans)} pans, "
            f"{self.timeline.duration_seconds}s timeline"
        )

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, str]], **kwargs) -> "SimulationEngine":
        """
        Raises:
            NoDataError: If the rows yield no usable cycle records
        """
        return cls(normalize_rows(rows), **kwargs)

    @classmethod
    def from_csv(cls, path: Union[str, Path], **kwargs) -> "SimulationEngine":
        return cls.from_rows(read_rows(path), **kwargs)

    @property
    def duration_seconds(self) -> int:
        return self.timeline.duration_seconds

    @property
    def last_second(self) -> int:
        return self.timeline.last_second

    @property
    def current_second(self) -> int:
        return self.reconstructor.current_second

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self.registry.diagnostics)

    def seek(self, second: float) -> SeekResult:
        return self.reconstructor.seek(second)

    def reset(self) -> None:
        self.reconstructor.reset()

    def snapshot(self) -> ReplaySnapshot:
        return self.reconstructor.snapshot()
