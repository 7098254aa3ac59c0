#!/usr/bin/env python3
"""
HREF CLI - High-Resolution Edit Format replay

Main entrypoint for the href command-line tool.
"""

import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from cli.commands import events, play, replay
from href.logging_config import setup_logging

# Initialize Typer app
app = typer.Typer(
    name="href",
    help="Replay captured text-editing sessions",
    add_completion=False,
)

# Console for rich output
console = Console()

# Add command groups
app.add_typer(events.app, name="events", help="Document inspection")

# Add standalone commands
app.command(name="replay")(replay.replay_command)
app.command(name="play")(play.play_command)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="text or json"),
):
    """Configure logging before any command runs."""
    setup_logging(level=log_level, log_format=log_format)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from href.core.document import HREF_VERSION

    table = Table(show_header=False, box=None)
    table.add_row("[bold]HREF CLI[/bold]", f"v{__version__}")
    table.add_row("Document format", HREF_VERSION)

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
