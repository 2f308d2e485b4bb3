"""
Pan location state machine.

One handler per event type mutates the entity registry:

    cook   machine assigned, location unchanged
    fill   -> Funnel, machine released, queue shifts (breading-queue mode)
    start  -> Holding, expire date set, breader recorded
    stop   -> Queue, back to home slot or queue tail (breading-queue mode)

Handlers signal recoverable problems by raising EventSkipped; the caller
records a diagnostic and carries on.
"""

from datetime import timedelta
from typing import Callable, Dict

from ..core.cycles import PanLocation, cook_seconds
from ..core.errors import InvalidTransitionError
from ..core.events import PanEvent, PanEventType
from ..core.state import FUNNEL_Y, HOLDING_Y, QUEUE_Y, EntityRegistry, Pan, slot_x

# Handler signature: (registry, pan, event) -> None
Handler = Callable[[EntityRegistry, Pan, PanEvent], None]

PAN_NOT_FOUND = "pan_not_found"
NO_MACHINE = "no_machine"


class EventSkipped(Exception):
    """Raised by a handler when an event cannot be applied."""

    def __init__(self, reason: str, detail: str = "") -> None:
        super().__init__(f"{reason}: {detail}" if detail else reason)
        self.reason = reason
        self.detail = detail


class TransitionTable:
    """
    Registry of event handlers.

    Usage:
        table = TransitionTable.default()
        table.apply(registry, event)
    """

    def __init__(self) -> None:
        self._handlers: Dict[PanEventType, Handler] = {}

    def register(self, event_type: PanEventType, handler: Handler) -> None:
        self._handlers[event_type] = handler

    def apply(self, registry: EntityRegistry, event: PanEvent) -> Pan:
        """
        Apply event to the registry.

        Returns:
            The pan the event moved

        Raises:
            InvalidTransitionError: If no handler is registered for the type
            EventSkipped: If the pan is unknown or no machine can take it
        """
        handler = self._handlers.get(event.event_type)
        if handler is None:
            raise InvalidTransitionError(f"No handler for event type: {event.event_type}")

        pan = registry.find_pan(event.protein_pan)
        if pan is None:
            raise EventSkipped(PAN_NOT_FOUND, event.protein_pan)

        handler(registry, pan, event)
        return pan

    @classmethod
    def default(cls) -> "TransitionTable":
        table = cls()
        table.register(PanEventType.COOK, on_cook)
        table.register(PanEventType.FILL, on_fill)
        table.register(PanEventType.START, on_start)
        table.register(PanEventType.STOP, on_stop)
        return table


def on_cook(registry: EntityRegistry, pan: Pan, ev: PanEvent) -> None:
    if registry.machine_for(pan.protein_pan) is not None:
        return

    machine = registry.free_machine(pan.spicy)
    if machine is None:
        kind = "spicy" if pan.spicy else "non-spicy"
        raise EventSkipped(NO_MACHINE, f"no free {kind} machine for {pan.protein_pan}")

    finish = ev.timestamp + timedelta(seconds=cook_seconds(pan.protein_name))
    machine.assign(pan.protein_pan, finish)


def on_fill(registry: EntityRegistry, pan: Pan, ev: PanEvent) -> None:
    if registry.settings.use_breading_queue and pan.pan_location == PanLocation.QUEUE:
        _shift_queue_forward(registry, pan)

    pan.move_to(pan.effective_x, FUNNEL_Y)
    pan.pan_location = PanLocation.FUNNEL

    machine = registry.machine_for(pan.protein_pan)
    if machine is not None:
        machine.release()


def on_start(registry: EntityRegistry, pan: Pan, ev: PanEvent) -> None:
    pan.move_to(pan.effective_x, HOLDING_Y)
    pan.pan_location = PanLocation.HOLDING
    pan.expire_date = ev.timestamp + timedelta(minutes=registry.settings.holding_minutes)
    registry.current_breader = ev.cycle.breader_id


def on_stop(registry: EntityRegistry, pan: Pan, ev: PanEvent) -> None:
    if registry.settings.use_breading_queue:
        target_x = _queue_tail_x(registry, pan)
    else:
        target_x = pan.start_x
    pan.move_to(target_x, QUEUE_Y)
    pan.pan_location = PanLocation.QUEUE


def _shift_queue_forward(registry: EntityRegistry, leaving: Pan) -> None:
    """Every queued pan behind `leaving` steps into the slot ahead of it."""
    queue = registry.queued_pans()
    idx = queue.index(leaving)
    targets = [p.effective_x for p in queue]
    for j in range(idx + 1, len(queue)):
        queue[j].move_to(targets[j - 1], QUEUE_Y)


def _queue_tail_x(registry: EntityRegistry, joining: Pan) -> float:
    queue = [p for p in registry.queued_pans() if p is not joining]
    if not queue:
        return slot_x(0)
    return queue[-1].effective_x + (slot_x(1) - slot_x(0))
