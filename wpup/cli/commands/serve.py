"""wpup serve — Start the update API server."""

from typing import Optional

import typer
from rich.console import Console

console = Console()


def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind to [default: WPUP_HOST]"),
    port: Optional[int] = typer.Option(None, help="Port to listen on [default: WPUP_PORT]"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (development)"),
):
    """Serve ``/`` and ``/index.php`` for WordPress update checks.

    Directories and caching come from WPUP_* env vars / .env.

    Example:
        WPUP_SERVER_DIR=/srv/updates wpup serve --port 8080
    """
    import uvicorn
    from wpup.config import config

    host = host or config.host
    port = port or config.port
    console.print(f"[green]Serving packages from {config.packages_dir} on {host}:{port}[/green]")
    uvicorn.run("wpup.api.main:app", host=host, port=port, reload=reload, log_level=config.log_level.lower())
