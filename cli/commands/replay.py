"""
Replay command: Reconstruct text state from a document
"""

import json
import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from href.core.errors import LoadError
from href.core.document import read_document
from href.replay import replay as replay_document, timeline
from href.replay.snapshot import compute_state_hash
from href.render import build_text

console = Console()


def replay_command(
    path: str = typer.Argument(..., help="Path to HREF document (JSON)"),
    until: Optional[float] = typer.Option(None, "--until", "-u", help="Replay events up to this time (ms)"),
    show_state: bool = typer.Option(False, "--show-state", "-s", help="Show final text state"),
    show_timeline: bool = typer.Option(False, "--timeline", "-t", help="Show state after every event"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay a document and report the reconstructed text state.

    Examples:
        href replay session.json
        href replay session.json --until 1500
        href replay session.json --show-state
        href replay session.json --timeline --json
    """
    try:
        document = read_document(path)
        result = replay_document(document, until=until)
        state_hash = compute_state_hash(result.state)

        # Count event types
        event_types = {}
        for event in document.events:
            if until is not None and event.time > until:
                break
            event_types[event.type] = event_types.get(event.type, 0) + 1

        steps = []
        if show_timeline:
            for event, state in timeline(document):
                if until is not None and event.time > until:
                    break
                steps.append((event, state))

        if json_output:
            output = {
                "success": True,
                "session_id": document.session.id,
                "events_replayed": result.applied,
                "time": result.time,
                "duration": document.duration,
                "state_hash": state_hash,
                "event_counts": event_types,
            }
            if show_state:
                output["state"] = result.state.to_dict()
            if show_timeline:
                output["timeline"] = [
                    {"time": ev.time, "type": ev.type, "state": st.to_dict()} for ev, st in steps
                ]
            print(json.dumps(output, indent=2, ensure_ascii=False))
        else:
            console.print(f"[green]✓ Replayed {result.applied} events successfully[/green]")
            console.print(f"  Session: [cyan]{document.session.id}[/cyan]")
            console.print(f"  Time: [cyan]{result.time}[/cyan] / {document.duration} ms")
            console.print(f"  State hash: [yellow]{state_hash}[/yellow]")

            table = Table(title="Event Counts")
            table.add_column("Event Type", style="green")
            table.add_column("Count", style="cyan", justify="right")
            for event_type in sorted(event_types.keys()):
                table.add_row(event_type, str(event_types[event_type]))
            console.print(table)

            if show_timeline:
                steps_table = Table(title="Timeline")
                steps_table.add_column("Time", style="cyan", justify="right")
                steps_table.add_column("Type", style="green")
                steps_table.add_column("Selection", style="yellow")
                steps_table.add_column("Text")
                for ev, st in steps:
                    steps_table.add_row(
                        str(ev.time),
                        ev.type,
                        f"{st.selection_start}-{st.selection_end}",
                        build_text(st),
                    )
                console.print(steps_table)

            if show_state:
                st = result.state
                console.print("\n[bold]Final Text State:[/bold]")
                console.print(f"  Selection: [yellow]{st.selection_start}-{st.selection_end}[/yellow]")
                console.print(build_text(st))

        raise typer.Exit(0)

    except FileNotFoundError:
        if json_output:
            print(json.dumps({"error": "Document not found", "path": path}))
        else:
            console.print(f"[red]Error: Document not found:[/red] {path}")
        raise typer.Exit(2)
    except LoadError as e:
        if json_output:
            print(json.dumps({"error": str(e), "problems": e.problems}))
        else:
            console.print(f"[red]Invalid document:[/red] {e}")
        raise typer.Exit(1)
