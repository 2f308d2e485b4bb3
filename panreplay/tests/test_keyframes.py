"""
Tests for keyframe compilation.

Critical: window bounds, consistent rounding and 4 events per cycle.
"""

from dataclasses import replace
from datetime import timedelta

import pytest

from panreplay.config import ReplaySettings
from panreplay.core.cycles import TargetZone
from panreplay.core.errors import NoDataError
from panreplay.core.events import DERIVATION_ORDER, PanEventType
from panreplay.tests._data import T0, busy_line, make_cycle
from panreplay.timeline import compile_timeline, derive_events


def _index_of(timeline, event_type, pan):
    for i, k in enumerate(timeline.keyframes):
        for ev in k.events:
            if ev.event_type is event_type and ev.protein_pan == pan:
                return i
    return None


def test_boundary_single_cycle():
    """Nuggets cook 180s: cook=T-190, fill=T-10, start=T, stop=T+300, 5 min padding."""
    timeline = compile_timeline([make_cycle("Nuggets 1", "nuggets", 0, 300)])

    assert timeline.window_start == T0 - timedelta(seconds=490)
    assert timeline.window_end == T0 + timedelta(seconds=600)
    assert timeline.duration_seconds == 1090

    assert _index_of(timeline, PanEventType.COOK, "Nuggets 1") == 300
    assert _index_of(timeline, PanEventType.FILL, "Nuggets 1") == 480
    assert _index_of(timeline, PanEventType.START, "Nuggets 1") == 490
    assert _index_of(timeline, PanEventType.STOP, "Nuggets 1") == 790


def test_derived_event_times():
    cycle = make_cycle("Filets 1", "filets", 0, 300)

    events = derive_events(cycle)

    assert [e.event_type for e in events] == list(DERIVATION_ORDER)
    assert events[0].timestamp == T0 - timedelta(seconds=290)
    assert events[1].timestamp == T0 - timedelta(seconds=10)
    assert events[2].timestamp == T0
    assert events[3].timestamp == T0 + timedelta(seconds=300)


def test_unknown_protein_cooks_for_zero_seconds():
    events = derive_events(make_cycle("Mystery 1", "tofu", 0, 300))

    assert events[0].timestamp == T0 - timedelta(seconds=10)


def test_four_events_per_cycle():
    cycles = busy_line()

    timeline = compile_timeline(cycles)

    assert timeline.event_count == 4 * len(cycles)
    assert timeline.event_counts() == {t.value: len(cycles) for t in PanEventType}


def test_window_end_uses_latest_stop_not_last_start():
    """A long early cycle can stop after a later short one."""
    cycles = [
        make_cycle("Filets 1", "filets", 0, 3000),
        make_cycle("Filets 2", "filets", 100, 60),
    ]

    timeline = compile_timeline(cycles)

    assert timeline.window_end == T0 + timedelta(seconds=3000 + 300)


def test_rounding_is_half_up():
    cycles = [
        make_cycle("Nuggets 1", "nuggets", 0, 300),
        make_cycle("Nuggets 2", "nuggets", 100.5, 300),
    ]

    timeline = compile_timeline(cycles)

    # 490 + 100.5 rounds up for every event of the cycle
    assert _index_of(timeline, PanEventType.START, "Nuggets 2") == 591
    assert _index_of(timeline, PanEventType.FILL, "Nuggets 2") == 581
    assert _index_of(timeline, PanEventType.COOK, "Nuggets 2") == 401
    assert _index_of(timeline, PanEventType.STOP, "Nuggets 2") == 891


def test_out_of_window_cycle_is_skipped_whole():
    good = make_cycle("Nuggets 1", "nuggets", 0, 300)
    bad = make_cycle("Filets 1", "filets", 60, 300)
    bad = replace(bad, stop_timestamp=T0 - timedelta(hours=1))

    timeline = compile_timeline([good, bad])

    assert timeline.event_count == 4
    assert len(timeline.skipped_cycles) == 1
    assert timeline.skipped_cycles[0].cycle is bad
    assert _index_of(timeline, PanEventType.COOK, "Filets 1") is None


def test_events_within_frame_keep_derivation_order():
    # Unknown protein: cook and fill land in the same second
    timeline = compile_timeline([make_cycle("Mystery 1", "tofu", 0, 300)])
    frame = timeline.keyframes[_index_of(timeline, PanEventType.COOK, "Mystery 1")]

    assert [e.event_type for e in frame.events] == [PanEventType.COOK, PanEventType.FILL]


def test_markers_by_target_zone():
    cycles = [
        make_cycle("Filets 1", "filets", 0, 300, TargetZone.TOO_LITTLE),
        make_cycle("Filets 2", "filets", 10, 300, TargetZone.SLIGHTLY_TOO_MUCH),
        make_cycle("Filets 3", "filets", 20, 300, TargetZone.ON_TARGET),
        make_cycle("Filets 4", "filets", 30, 300, TargetZone.UNKNOWN),
    ]

    timeline = compile_timeline(cycles)

    assert [m.color for m in timeline.markers] == ["red", "yellow", "green"]
    assert timeline.markers[0].second == _index_of(timeline, PanEventType.STOP, "Filets 1")


def test_clamp_and_time_conversion():
    timeline = compile_timeline([make_cycle("Nuggets 1", "nuggets", 0, 300)])

    assert timeline.clamp(-10) == 0
    assert timeline.clamp(10_000) == timeline.duration_seconds - 1
    assert timeline.clamp(12.9) == 12
    assert timeline.time_at(490) == T0
    assert timeline.second_at(T0) == 490


def test_empty_cycles_is_fatal():
    with pytest.raises(NoDataError):
        compile_timeline([])


@pytest.mark.parametrize("padding", [0, 1])
@pytest.mark.parametrize("hold", [300, 300.7])
def test_small_padding_keeps_latest_stop(padding, hold):
    cycles = [
        make_cycle("Nuggets 1", "nuggets", 0, 300),
        make_cycle("Nuggets 2", "nuggets", 20, hold),
    ]

    timeline = compile_timeline(cycles, ReplaySettings(window_padding_seconds=padding))

    assert timeline.skipped_cycles == ()
    assert timeline.event_count == 8
    stop = _index_of(timeline, PanEventType.STOP, "Nuggets 2")
    assert stop == timeline.last_second


def test_non_finite_positions_are_clamped():
    timeline = compile_timeline([make_cycle("Nuggets 1", "nuggets", 0, 300)])

    assert timeline.clamp(float("nan")) == 0
    assert timeline.clamp(float("-inf")) == 0
    assert timeline.clamp(float("inf")) == timeline.last_second
