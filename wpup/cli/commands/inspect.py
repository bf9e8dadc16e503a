"""wpup inspect — Parse a package ZIP and show the metadata it would serve."""

import json
from datetime import datetime, timezone
from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from wpup.core.package import extract_metadata
from wpup.exceptions import WpupError

console = Console()


def _display(value) -> str:
    if isinstance(value, list):
        return ", ".join(value) or "[dim](none)[/dim]"
    if isinstance(value, str) and len(value) > 70:
        return value[:67] + "..."
    return str(value)


def inspect_package(
    path: Path = typer.Argument(..., help="Plugin or theme ZIP"),
    as_json: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
):
    """Show the metadata the update API returns for a package.

    The cache is bypassed; the archive is parsed every time.

    Example:
        wpup inspect packages/my-plugin.zip
        wpup inspect packages/my-theme.zip --json
    """
    try:
        metadata = extract_metadata(path)
    except WpupError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    data = metadata.to_dict()
    if as_json:
        console.print_json(json.dumps(data, indent=2))
        return

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title=f"[bold]{data.get('name', path.name)}[/bold]",
    )
    table.add_column("Field", style="cyan", width=18)
    table.add_column("Value", width=72)

    sections = data.pop("sections", {})
    for key, value in data.items():
        table.add_row(key, _display(value))
    for title, body in sections.items():
        table.add_row(f"[dim]section[/dim] {title}", f"[dim]{len(body)} chars[/dim]")

    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    console.print()
    console.print(table)
    console.print()
    console.print(f"[dim]{path} — {path.stat().st_size} bytes, modified {mtime:%Y-%m-%d %H:%M:%S} UTC[/dim]")
