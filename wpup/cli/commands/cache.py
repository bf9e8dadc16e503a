"""wpup cache — Metadata cache maintenance."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

console = Console()


def cache_purge(
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Cache directory [default: WPUP_CACHE_DIR]"),
):
    """Delete expired and unreadable metadata cache entries.

    Live entries are kept. Safe to run from cron while the server is up.

    Example:
        wpup cache purge
    """
    from wpup.cache.file_cache import FileCache
    from wpup.config import config

    directory = cache_dir or config.cache_dir
    if not directory.is_dir():
        console.print(f"[yellow]No cache directory at {directory}[/yellow]")
        return

    removed = FileCache(directory).purge_expired()
    console.print(f"[green]Removed {removed} cache entr{'y' if removed == 1 else 'ies'}[/green] from {directory}")
