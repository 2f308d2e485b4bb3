"""
Helpers shared by CLI commands.
"""

import json
from datetime import datetime, time
from typing import Any, Dict, NoReturn, Optional

import typer
from rich.console import Console

from panreplay.config import ReplaySettings, load_settings
from panreplay.core.errors import ConfigError, NoDataError
from panreplay.ingest import Dataset, normalize_rows, read_rows, parse_timestamp
from panreplay.timeline import Timeline

console = Console()


def fail(message: str, json_output: bool, code: int = 2, **extra: Any) -> NoReturn:
    if json_output:
        print(json.dumps({"error": message, **extra}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code)


def settings_from_options(
    settings_file: Optional[str],
    json_output: bool,
    spicy_left_side: Optional[bool] = None,
    use_breading_queue: Optional[bool] = None,
) -> ReplaySettings:
    try:
        return load_settings(
            settings_file,
            spicy_left_side=spicy_left_side,
            use_breading_queue=use_breading_queue,
        )
    except ConfigError as e:
        fail(str(e), json_output)


def load_dataset(csv_path: str, json_output: bool) -> Dataset:
    try:
        return normalize_rows(read_rows(csv_path))
    except FileNotFoundError:
        fail(f"CSV file not found: {csv_path}", json_output, path=csv_path)
    except NoDataError as e:
        fail(f"Could not load {csv_path}: {e}", json_output, path=csv_path)


def resolve_second(
    timeline: Timeline, second: Optional[int], at: Optional[str], json_output: bool = False
) -> int:
    """
    Timeline second from --second or --at.

    --at accepts a full timestamp or a time of day (HH:MM[:SS]) on the
    window's start date.
    """
    if at:
        try:
            when = datetime.combine(timeline.window_start.date(), time.fromisoformat(at))
        except ValueError:
            try:
                when = parse_timestamp(at)
            except ValueError:
                fail(f"Invalid --at value: {at!r} (expected HH:MM[:SS] or an ISO timestamp)", json_output)
        return timeline.second_at(when)
    return timeline.clamp(second or 0)


def dataset_summary(dataset: Dataset) -> Dict[str, Any]:
    return {
        "location_id": dataset.location_id,
        "date": dataset.date.isoformat(),
        "cycles": len(dataset.cycles),
        "duplicates_dropped": dataset.duplicates_dropped,
        "rows_rejected": dataset.rows_rejected,
    }
