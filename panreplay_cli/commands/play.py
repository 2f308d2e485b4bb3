"""
Play command: live terminal playback of a CSV export.
"""

from typing import Optional

import typer
from rich.live import Live

from panreplay.metrics import start_metrics_server
from panreplay.playback import BlockingTicker, PlaybackDriver
from panreplay.simulation import SimulationEngine

from ..render import LiveRenderer
from ._common import console, load_dataset, settings_from_options


class _BoundedEngine:
    """Seekable view of an engine that ends playback at `stop`."""

    def __init__(self, engine: SimulationEngine, stop: int) -> None:
        self.engine = engine
        self.stop = stop

    @property
    def last_second(self) -> int:
        return self.stop

    def seek(self, second: float):
        return self.engine.seek(second)


def play_command(
    csv_path: str = typer.Argument(..., help="Path to the pan cycle CSV export"),
    start: int = typer.Option(0, "--from", help="Start second"),
    stop: Optional[int] = typer.Option(None, "--to", help="Stop second (default: end of window)"),
    speed: float = typer.Option(1.0, "--speed", "-x", help="Playback speed multiplier"),
    spicy_left_side: Optional[bool] = typer.Option(
        None, "--spicy-left/--spicy-right", help="Side of the spicy machines"
    ),
    use_breading_queue: Optional[bool] = typer.Option(
        None, "--breading-queue/--fixed-slots", help="Shift queued pans forward"
    ),
    settings_file: Optional[str] = typer.Option(None, "--settings", help="JSON preferences file"),
    metrics_port: Optional[int] = typer.Option(None, "--metrics-port", help="Expose Prometheus metrics"),
):
    """
    Play the replay in the terminal until the stop second (Ctrl-C pauses and exits).

    Examples:
        panreplay play cycles.csv --speed 20
        panreplay play cycles.csv --from 600 --to 1200 --breading-queue
    """
    settings = settings_from_options(settings_file, False, spicy_left_side, use_breading_queue)
    dataset = load_dataset(csv_path, False)

    if metrics_port:
        start_metrics_server(metrics_port)

    with Live(console=console, refresh_per_second=20) as live:
        renderer = LiveRenderer(live)
        engine = SimulationEngine(dataset, settings, renderer=renderer)
        last = engine.last_second if stop is None else max(0, min(stop, engine.last_second))
        renderer.last_second = last

        ticker = BlockingTicker()
        driver = PlaybackDriver(
            _BoundedEngine(engine, last),
            ticker,
            tick_seconds=settings.tick_seconds,
            skip_seconds=settings.skip_seconds,
        )
        driver.set_playback_speed(speed)
        driver.seek(start)
        driver.play()
        try:
            ticker.run()
        except KeyboardInterrupt:
            driver.pause()

    console.print(
        f"Stopped at second [cyan]{driver.position}[/cyan] "
        f"({engine.timeline.time_at(driver.position):%H:%M:%S}), "
        f"{len(engine.diagnostics)} diagnostics"
    )
    raise typer.Exit(0)
