"""
Terminal rendering of replay snapshots with rich.
"""

from typing import Optional

from rich.console import Group
from rich.live import Live
from rich.table import Table
from rich.text import Text

from panreplay.core.cycles import PanLocation, TargetZone
from panreplay.query import location_counts, pans_in
from panreplay.render.animation import pan_position
from panreplay.render.snapshot import ReplaySnapshot

ZONE_STYLES = {
    TargetZone.TOO_LITTLE: "red",
    TargetZone.SLIGHTLY_TOO_LITTLE: "yellow",
    TargetZone.ON_TARGET: "green",
    TargetZone.SLIGHTLY_TOO_MUCH: "yellow",
    TargetZone.TOO_MUCH: "red",
}


def pans_table(snapshot: ReplaySnapshot) -> Table:
    table = Table(title="Pans")
    table.add_column("Pan", style="cyan")
    table.add_column("Location", style="green")
    table.add_column("Position", justify="right")
    table.add_column("Expires", justify="right")

    for loc in (PanLocation.QUEUE, PanLocation.FUNNEL, PanLocation.HOLDING):
        for pan in pans_in(snapshot, loc):
            x, y = pan_position(pan, snapshot.progress)
            expires = pan.countdown(snapshot.sim_time)
            style = "bold red" if pan.expired(snapshot.sim_time) else ""
            table.add_row(pan.label, loc.name.title(), f"{x:.0f},{y:.0f}", Text(expires, style=style))
    return table


def machines_table(snapshot: ReplaySnapshot) -> Table:
    table = Table(title="Machines")
    table.add_column("#", justify="right")
    table.add_column("Mode")
    table.add_column("Cooking", style="cyan")
    table.add_column("Left (s)", justify="right")

    for m in snapshot.machines:
        mode = "spicy" if m.open_mode else "regular"
        left = "" if m.remaining_seconds is None else str(m.remaining_seconds)
        table.add_row(str(m.index + 1), mode, m.cooking_protein or "-", left)
    return table


def notifications_text(snapshot: ReplaySnapshot) -> Text:
    text = Text()
    for n in snapshot.notifications:
        style = ZONE_STYLES.get(n.target_zone, "") if n.event_type == "stop" else ""
        text.append(n.message + "\n", style=style or "bold")
    return text


def header_text(snapshot: ReplaySnapshot, last_second: Optional[int] = None) -> Text:
    counts = location_counts(snapshot)
    pos = f"{snapshot.second}" if last_second is None else f"{snapshot.second}/{last_second}"
    return Text.assemble(
        ("t=", "dim"),
        (snapshot.sim_time.strftime("%Y-%m-%d %H:%M:%S"), "bold"),
        (f"  [{pos}]", "dim"),
        ("  breader: ", "dim"),
        (snapshot.current_breader or "-", "magenta"),
        ("  queue/funnel/holding: ", "dim"),
        (f"{counts['queue']}/{counts['funnel']}/{counts['holding']}", "cyan"),
    )


def snapshot_view(snapshot: ReplaySnapshot, last_second: Optional[int] = None) -> Group:
    return Group(
        header_text(snapshot, last_second),
        notifications_text(snapshot),
        machines_table(snapshot),
        pans_table(snapshot),
    )


class LiveRenderer:
    """Renderer that redraws a rich Live display on every snapshot."""

    def __init__(self, live: Live, last_second: Optional[int] = None) -> None:
        self.live = live
        self.last_second = last_second

    def render(self, snapshot: ReplaySnapshot) -> None:
        self.live.update(snapshot_view(snapshot, self.last_second))

