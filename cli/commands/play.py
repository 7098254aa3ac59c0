"""
Play command: Live terminal playback of a document
"""

import json
import time
import typer
from typing import Optional
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel

from href.config import PlayerOptions
from href.core.errors import LoadError, OperationError
from href.render import RichTextViewer
from href.replay import HrefPlayer

console = Console()


def _status_line(player: HrefPlayer) -> str:
    st = player.get_state()
    return (
        f"[cyan]{st.current_time:.0f}[/cyan] / {st.duration:.0f} ms  "
        f"x{st.speed:g}  [dim]{st.status.value}[/dim]  "
        f"sel {st.text_state.selection_start}-{st.text_state.selection_end}"
    )


def start_playback(player: HrefPlayer) -> bool:
    """Start playing unless a seek already left the player at the end."""
    if player.scheduler.is_finished:
        return False
    player.play()
    return True


def play_command(
    path: str = typer.Argument(..., help="Path to HREF document (JSON)"),
    speed: Optional[float] = typer.Option(None, "--speed", "-x", help="Playback speed multiplier"),
    seek: Optional[float] = typer.Option(None, "--seek", help="Start from this time (ms)"),
    tick_ms: Optional[float] = typer.Option(None, "--tick-ms", help="Redraw interval (ms)"),
    no_selection: bool = typer.Option(False, "--no-selection", help="Do not highlight selections"),
):
    """
    Replay a document live in the terminal.

    Examples:
        href play session.json
        href play session.json --speed 4
        href play session.json --seek 2000
    """
    options = PlayerOptions.from_env(
        speed=speed,
        tick_interval_ms=tick_ms,
        show_selection=False if no_selection else None,
    )
    viewer = RichTextViewer(console=console, show_selection=options.show_selection, show_caret=True)

    try:
        player = HrefPlayer(options=options, viewer=viewer)
        player.load_file(path)
        if seek is not None:
            player.seek(seek)
    except FileNotFoundError:
        console.print(f"[red]Error: Document not found:[/red] {path}")
        raise typer.Exit(2)
    except LoadError as e:
        console.print(f"[red]Invalid document:[/red] {e}")
        raise typer.Exit(1)
    except OperationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    def frame():
        return Group(Panel(viewer.last, title=player.document.session.id), _status_line(player))

    interval = options.tick_interval_ms / 1000.0
    try:
        with Live(frame(), console=console, auto_refresh=False) as live:
            start_playback(player)
            while player.scheduler.is_playing:
                player.tick()
                live.update(frame(), refresh=True)
                time.sleep(interval)
    except KeyboardInterrupt:
        player.pause()
        console.print("[yellow]Paused[/yellow]")

    print(json.dumps(player.get_text_state().to_dict(), ensure_ascii=False))
    raise typer.Exit(0)
