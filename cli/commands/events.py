"""
Document commands: list, validate
"""

import json
import typer
from typing import Optional
from rich.console import Console
from rich.table import Table
from rich.syntax import Syntax

from href.core.errors import LoadError
from href.core.document import read_document, validate_document
from href.core.events import KNOWN_TYPES, event_to_dict

app = typer.Typer()
console = Console()


def _summary(event) -> str:
    data = event_to_dict(event)
    for key in ("time", "type", "pos", "modifiers", "meta"):
        data.pop(key, None)
    return json.dumps(data, ensure_ascii=False) if data else ""


@app.command("list")
def list_events(
    path: str = typer.Argument(..., help="Path to HREF document (JSON)"),
    event_type: Optional[str] = typer.Option(None, "--type", "-t", help="Filter by event type"),
    from_time: Optional[float] = typer.Option(None, "--from", help="Start at this time (ms)"),
    to_time: Optional[float] = typer.Option(None, "--to", help="End at this time (ms)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List document events with filters.

    Examples:
        href events list session.json
        href events list session.json --type selectionchange
        href events list session.json --from 1000 --to 2000 --json
    """
    try:
        document = read_document(path)
        rows = list(enumerate(document.events))

        if from_time is not None:
            rows = [(i, ev) for i, ev in rows if ev.time >= from_time]
        if to_time is not None:
            rows = [(i, ev) for i, ev in rows if ev.time <= to_time]
        if event_type:
            rows = [(i, ev) for i, ev in rows if ev.type == event_type]

        if not rows:
            if not json_output:
                console.print("[yellow]No events match the filters[/yellow]")
            else:
                print(json.dumps({"events": [], "count": 0}))
            raise typer.Exit(0)

        if json_output:
            events_data = [dict(event_to_dict(ev), index=i) for i, ev in rows]
            print(json.dumps({"events": events_data, "count": len(events_data)}, indent=2, ensure_ascii=False))
        else:
            table = Table(title=f"Events: {path}")
            table.add_column("#", style="cyan", justify="right")
            table.add_column("Time", style="cyan", justify="right")
            table.add_column("Type", style="green")
            table.add_column("Pos", style="yellow", justify="right")
            table.add_column("Details", style="dim")

            for i, ev in rows:
                type_label = ev.type if ev.type in KNOWN_TYPES else f"{ev.type} (unrecognized)"
                table.add_row(
                    str(i),
                    str(ev.time),
                    type_label,
                    "" if ev.pos is None else str(ev.pos),
                    _summary(ev),
                )

            console.print(table)
            console.print(f"\n[bold]Total events:[/bold] {len(rows)}")

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


@app.command()
def validate(
    path: str = typer.Argument(..., help="Path to HREF document (JSON)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Validate a document against the v0.1 schema.

    Exit code 0 when valid, 1 when invalid.

    Examples:
        href events validate session.json
        href events validate session.json --json
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    except FileNotFoundError:
        if json_output:
            print(json.dumps({"error": "Document not found", "path": path}))
        else:
            console.print(f"[red]Error: Document not found:[/red] {path}")
        raise typer.Exit(2)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        problems = [f"Malformed JSON: {e}"]
    else:
        problems = validate_document(data)

    if json_output:
        print(json.dumps({"valid": not problems, "problems": problems}, indent=2))
    elif problems:
        console.print(f"[red]✗ {path} is not a valid HREF document[/red]")
        for problem in problems:
            console.print(f"  - {problem}")
    else:
        console.print(f"[green]✓ {path} is a valid HREF document[/green]")
        console.print(
            Syntax(
                json.dumps(data["session"], indent=2, ensure_ascii=False),
                "json",
                theme="monokai",
                line_numbers=False,
            )
        )

    raise typer.Exit(1 if problems else 0)
