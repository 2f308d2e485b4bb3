"""
Tests for the entity registry.
"""

from panreplay.config import ReplaySettings
from panreplay.core.cycles import PanLocation
from panreplay.core.events import PanEvent, PanEventType
from panreplay.core.state import MACHINE_COUNT, QUEUE_Y, EntityRegistry, slot_x
from panreplay.tests._data import T0, make_cycle


def _cycles():
    return [
        make_cycle("Nuggets 1", "nuggets", 0),
        make_cycle("Spicy 1", "spicy", 10),
        make_cycle("Filets 1", "filets", 20),
        make_cycle("Nuggets 1", "nuggets", 900),
    ]


def test_one_pan_per_identifier():
    registry = EntityRegistry.from_cycles(_cycles(), ReplaySettings())

    assert sorted(p.protein_pan for p in registry.pans) == ["Filets 1", "Nuggets 1", "Spicy 1"]


def test_spicy_first_when_spicy_left():
    registry = EntityRegistry.from_cycles(_cycles(), ReplaySettings(spicy_left_side=True))

    assert [p.protein_pan for p in registry.pans] == ["Spicy 1", "Filets 1", "Nuggets 1"]


def test_alphabetical_when_spicy_right():
    registry = EntityRegistry.from_cycles(_cycles(), ReplaySettings(spicy_left_side=False))

    assert [p.protein_pan for p in registry.pans] == ["Filets 1", "Nuggets 1", "Spicy 1"]


def test_reset_places_pans_in_queue_slots():
    registry = EntityRegistry.from_cycles(_cycles(), ReplaySettings(spicy_left_side=False))

    for index, pan in enumerate(registry.pans):
        assert pan.pan_location == PanLocation.QUEUE
        assert pan.x == pan.start_x == slot_x(index)
        assert pan.y == QUEUE_Y
        assert not pan.in_transition
        assert pan.expire_date is None


def test_machine_split():
    left = EntityRegistry.from_cycles(_cycles(), ReplaySettings(spicy_left_side=True))
    right = EntityRegistry.from_cycles(_cycles(), ReplaySettings(spicy_left_side=False))

    assert len(left.machines) == MACHINE_COUNT
    assert [m.open_mode for m in left.machines] == [True, True, True, False, False, False]
    assert [m.open_mode for m in right.machines] == [False, False, False, True, True, True]


def test_reset_all_clears_derived_state():
    registry = EntityRegistry.from_cycles(_cycles(), ReplaySettings())
    cycle = _cycles()[0]
    event = PanEvent(PanEventType.START, T0, cycle)

    registry.machines[0].assign("Spicy 1", T0)
    registry.notify(event)
    registry.executed.add(event.key)
    registry.current_breader = "B9"
    registry.pans[0].move_to(999, 999)

    registry.reset_all()

    assert all(not m.cooking for m in registry.machines)
    assert registry.notifications == []
    assert registry.executed == set()
    assert registry.current_breader is None
    assert not registry.pans[0].in_transition


def test_notification_lifetime():
    registry = EntityRegistry.from_cycles(_cycles(), ReplaySettings(notification_frames=2.5))
    event = PanEvent(PanEventType.START, T0, _cycles()[0])

    registry.notify(event)
    registry.notify(event)
    assert len(registry.notifications) == 1
    assert registry.notifications[0].message == "NUGGETS 1 scanned in"

    registry.tick_notifications()
    registry.tick_notifications()
    assert registry.notifications[0].duration == 0.5

    registry.tick_notifications()
    assert registry.notifications == []


def test_commit_transitions():
    registry = EntityRegistry.from_cycles(_cycles(), ReplaySettings())
    pan = registry.pans[1]
    pan.move_to(400.0, 300.0)

    registry.commit_transitions()

    assert (pan.x, pan.y) == (400.0, 300.0)
    assert pan.next_x is None and pan.next_y is None
