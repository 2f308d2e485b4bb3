"""
Seek command: reconstruct the line state at one point of the timeline.
"""

import json
from dataclasses import asdict
from typing import Optional

import typer
from rich.table import Table

from panreplay.core.canonical import canonicalize
from panreplay.render.snapshot import compute_snapshot_hash
from panreplay.simulation import SimulationEngine

from ..render import snapshot_view
from ._common import console, load_dataset, resolve_second, settings_from_options


def seek_command(
    csv_path: str = typer.Argument(..., help="Path to the pan cycle CSV export"),
    second: Optional[int] = typer.Option(None, "--second", "-s", help="Timeline second"),
    at: Optional[str] = typer.Option(None, "--at", help="Wall time (HH:MM[:SS] or ISO timestamp)"),
    spicy_left_side: Optional[bool] = typer.Option(
        None, "--spicy-left/--spicy-right", help="Side of the spicy machines"
    ),
    use_breading_queue: Optional[bool] = typer.Option(
        None, "--breading-queue/--fixed-slots", help="Shift queued pans forward"
    ),
    settings_file: Optional[str] = typer.Option(None, "--settings", help="JSON preferences file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Reconstruct pans, machines and notifications at a timeline position.

    Examples:
        panreplay seek cycles.csv --second 900
        panreplay seek cycles.csv --at 11:42:05 --breading-queue
        panreplay seek cycles.csv --at 11:42 --json
    """
    settings = settings_from_options(settings_file, json_output, spicy_left_side, use_breading_queue)
    dataset = load_dataset(csv_path, json_output)
    engine = SimulationEngine(dataset, settings)

    target = resolve_second(engine.timeline, second, at, json_output)
    result = engine.seek(target)
    snapshot = result.snapshot
    state_hash = compute_snapshot_hash(snapshot)

    if json_output:
        output = {
            "second": result.second,
            "applied": result.applied,
            "skipped": result.skipped,
            "snapshot_hash": state_hash,
            "snapshot": canonicalize(snapshot.state_dict()),
            "diagnostics": [canonicalize(asdict(d)) for d in engine.diagnostics],
        }
        print(json.dumps(output, indent=2))
        raise typer.Exit(0)

    console.print(snapshot_view(snapshot, engine.last_second))
    console.print(f"  Events applied: [cyan]{result.applied}[/cyan]  skipped: [yellow]{result.skipped}[/yellow]")
    console.print(f"  Snapshot hash: [yellow]{state_hash}[/yellow]")

    if engine.diagnostics:
        table = Table(title="Diagnostics")
        table.add_column("Second", justify="right")
        table.add_column("Reason", style="yellow")
        table.add_column("Event")
        table.add_column("Pan", style="cyan")
        for d in engine.diagnostics:
            table.add_row(str(d.second), d.reason, d.event_type, d.protein_pan)
        console.print(table)

    raise typer.Exit(0)
