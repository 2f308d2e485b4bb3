#!/usr/bin/env python3
"""
Pan Replay CLI - scrubbable replay of recorded kitchen-line pan cycles

Main entrypoint for the panreplay command-line tool.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from panreplay.logging_config import setup_logging
from panreplay_cli.commands import play, seek, timeline

app = typer.Typer(
    name="panreplay",
    help="Replay recorded kitchen-line pan cycles",
    add_completion=False,
)

console = Console()

app.command("timeline")(timeline.timeline_command)
app.command("seek")(seek.seek_command)
app.command("play")(play.play_command)


@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="json or text"),
):
    """Configure logging before any command runs."""
    setup_logging(level=log_level or "WARNING", log_format=log_format)


@app.command()
def version():
    """Show version information."""
    from panreplay import __version__ as engine_version
    from panreplay_cli import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Pan Replay CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
