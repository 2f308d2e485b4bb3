"""
Tests for the state reconstructor.

Critical: same second always yields the same state, regardless of the
seek path taken to reach it.
"""

import pytest

from panreplay.config import ReplaySettings
from panreplay.core.state import EntityRegistry
from panreplay.render import ManualFrameScheduler, compute_snapshot_hash
from panreplay.replay import StateReconstructor
from panreplay.simulation import SimulationEngine
from panreplay.tests._data import busy_line, make_cycle, make_dataset
from panreplay.timeline import compile_timeline


class RecordingRenderer:
    def __init__(self):
        self.frames = []

    def render(self, snapshot):
        self.frames.append(snapshot)


def _busy_engine(**kwargs):
    return SimulationEngine(make_dataset(busy_line()), ReplaySettings(**kwargs))


def _nuggets_engine(**kwargs):
    return SimulationEngine(make_dataset([make_cycle("Nuggets 1", "nuggets", 0, 300)]), **kwargs)


def test_same_second_twice_same_hash():
    engine = _busy_engine()

    first = compute_snapshot_hash(engine.seek(900).snapshot)
    second = compute_snapshot_hash(engine.seek(900).snapshot)

    assert first == second


@pytest.mark.parametrize("breading", [False, True])
@pytest.mark.parametrize("n, m", [(1500, 200), (900, 899), (700, 0), (1200, 600), (400, 1800)])
def test_seek_path_does_not_matter(breading, n, m):
    """seek(N), seek(M), seek(N) equals a fresh seek(N)."""
    wandering = _busy_engine(use_breading_queue=breading)
    wandering.seek(n)
    wandering.seek(m)
    after = wandering.seek(n).snapshot

    fresh = _busy_engine(use_breading_queue=breading).seek(n).snapshot

    assert after == fresh
    assert compute_snapshot_hash(after) == compute_snapshot_hash(fresh)


@pytest.mark.parametrize("breading", [False, True])
def test_stepping_matches_direct_seek(breading):
    stepping = _busy_engine(use_breading_queue=breading)
    direct = _busy_engine(use_breading_queue=breading)

    for target in (600, 601, 1100):
        for second in range(stepping.current_second, target + 1):
            stepping.seek(second)
        assert stepping.snapshot() == direct.seek(target).snapshot


def test_full_traversal_processes_every_event_once():
    engine = _busy_engine()
    processed = 0

    for second in range(engine.duration_seconds):
        result = engine.seek(second)
        processed += result.applied + result.skipped

        busy = [m.cooking_protein for m in result.snapshot.machines if m.cooking]
        assert len(result.snapshot.machines) == 6
        assert len(busy) == len(set(busy))

    assert processed == engine.timeline.event_count == 4 * len(busy_line())
    assert len(engine.registry.executed) == engine.timeline.event_count
    assert engine.diagnostics == []


def test_backward_seek_rebuilds():
    engine = _nuggets_engine()

    assert engine.seek(600).rebuilt is False
    result = engine.seek(350)
    assert result.rebuilt is True
    assert result.applied == 1  # the cook at 300
    assert engine.seek(350).rebuilt is False


def test_targets_are_clamped_and_floored():
    engine = _nuggets_engine()

    assert engine.seek(-5).second == 0
    assert engine.seek(10 ** 6).second == engine.last_second == 1089
    assert engine.seek(12.7).second == 12


def test_reset_returns_to_initial_state():
    engine = _busy_engine()
    initial = engine.seek(0).snapshot

    engine.seek(1500)
    engine.reset()

    assert engine.current_second == 0
    assert engine.snapshot() == initial


def test_notifications_age_one_unit_per_frame():
    engine = _nuggets_engine()

    snap = engine.seek(490).snapshot
    messages = {n.message: n.duration for n in snap.notifications}
    assert messages == {
        "NUGGETS 1 finished cooking": 90,
        "NUGGETS 1 scanned in": 100,
    }

    durations = {n.message: n.duration for n in engine.seek(579).snapshot.notifications}
    assert durations["NUGGETS 1 finished cooking"] == 1
    messages = [n.message for n in engine.seek(580).snapshot.notifications]
    assert "NUGGETS 1 finished cooking" not in messages

    snap = engine.seek(790).snapshot
    assert [n.message for n in snap.notifications] == ["NUGGETS 1 scanned out On Time"]


def test_skipped_frames_render_once_without_scheduler():
    renderer = RecordingRenderer()
    engine = _nuggets_engine(renderer=renderer)

    engine.seek(100)
    engine.seek(490)

    assert [f.second for f in renderer.frames] == [100, 490]
    assert renderer.frames[0].progress == 0.0
    assert renderer.frames[1].progress == 1.0


def _animated(now):
    cycles = [make_cycle("Nuggets 1", "nuggets", 0, 300)]
    renderer = RecordingRenderer()
    scheduler = ManualFrameScheduler()
    reconstructor = StateReconstructor(
        compile_timeline(cycles),
        EntityRegistry.from_cycles(cycles, ReplaySettings(animation_seconds=0.2)),
        renderer=renderer,
        scheduler=scheduler,
        animation_clock=lambda: now[0],
    )
    return reconstructor, renderer, scheduler


def test_transition_animates_to_completion():
    now = [10.0]
    reconstructor, renderer, scheduler = _animated(now)

    reconstructor.seek(490)
    assert renderer.frames[-1].progress == 0.0
    assert reconstructor.animating

    now[0] = 10.1
    scheduler.run_pending()
    assert renderer.frames[-1].progress == pytest.approx(0.5)

    now[0] = 10.3
    scheduler.run_pending()
    assert renderer.frames[-1].progress == 1.0
    assert scheduler.pending == 0
    assert not reconstructor.animating


def test_new_seek_cancels_running_animation():
    now = [0.0]
    reconstructor, renderer, scheduler = _animated(now)

    reconstructor.seek(490)
    assert scheduler.pending == 1

    reconstructor.seek(500)

    assert scheduler.pending == 0
    assert not reconstructor.animating
    assert renderer.frames[-1].second == 500
    assert renderer.frames[-1].progress == 0.0


def test_non_finite_targets_are_clamped():
    engine = _nuggets_engine()

    assert engine.seek(float("inf")).second == engine.last_second
    assert engine.seek(float("nan")).second == 0
    assert engine.seek(float("-inf")).second == 0
