"""
Timeline command: compile a CSV export and summarize its keyframe timeline.
"""

import json
from typing import Optional

import typer
from rich.table import Table

from panreplay.timeline import compile_timeline

from ._common import console, dataset_summary, load_dataset, settings_from_options


def timeline_command(
    csv_path: str = typer.Argument(..., help="Path to the pan cycle CSV export"),
    settings_file: Optional[str] = typer.Option(None, "--settings", help="JSON preferences file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Summarize the simulation window, event counts and scan-out markers.

    Examples:
        panreplay timeline cycles.csv
        panreplay timeline cycles.csv --json
    """
    settings = settings_from_options(settings_file, json_output)
    dataset = load_dataset(csv_path, json_output)
    timeline = compile_timeline(dataset.cycles, settings)

    marker_counts = {"red": 0, "yellow": 0, "green": 0}
    for marker in timeline.markers:
        marker_counts[marker.color] += 1

    if json_output:
        output = {
            **dataset_summary(dataset),
            "window_start": timeline.window_start.isoformat(),
            "window_end": timeline.window_end.isoformat(),
            "duration_seconds": timeline.duration_seconds,
            "event_count": timeline.event_count,
            "event_counts": timeline.event_counts(),
            "markers": marker_counts,
            "skipped_cycles": [
                {
                    "protein_pan": s.cycle.protein_pan,
                    "start_timestamp": s.cycle.start_timestamp.isoformat(),
                    "reason": s.reason,
                }
                for s in timeline.skipped_cycles
            ],
        }
        print(json.dumps(output, indent=2))
        raise typer.Exit(0)

    console.print(f"[bold]Location[/bold] {dataset.location_id}  [dim]({len(dataset.cycles)} cycles)[/dim]")
    console.print(
        f"  Window: [cyan]{timeline.window_start:%H:%M:%S}[/cyan] -> "
        f"[cyan]{timeline.window_end:%H:%M:%S}[/cyan] ({timeline.duration_seconds}s)"
    )
    if dataset.duplicates_dropped or dataset.rows_rejected:
        console.print(
            f"  [yellow]{dataset.duplicates_dropped} duplicate rows dropped, "
            f"{dataset.rows_rejected} rows rejected[/yellow]"
        )

    table = Table(title="Event Counts")
    table.add_column("Event Type", style="green")
    table.add_column("Count", style="cyan", justify="right")
    for event_type, count in timeline.event_counts().items():
        table.add_row(event_type, str(count))
    console.print(table)

    console.print(
        f"  Scan-outs: [red]{marker_counts['red']} off target[/red], "
        f"[yellow]{marker_counts['yellow']} slightly off[/yellow], "
        f"[green]{marker_counts['green']} on target[/green]"
    )
    for skipped in timeline.skipped_cycles:
        console.print(f"  [yellow]skipped[/yellow] {skipped.cycle.protein_pan}: {skipped.reason}")

    raise typer.Exit(0)
