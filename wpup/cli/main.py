"""wpup CLI — Typer application."""

import typer
from rich.console import Console

from wpup.version import __version__

app = typer.Typer(
    name="wpup",
    help="wpup — self-hosted update API for WordPress plugins and themes.",
    no_args_is_help=True,
    invoke_without_command=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", is_eager=True, help="Show version"),
):
    """wpup CLI."""
    if version:
        console.print(f"wpup v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# ── Server ─────────────────────────────────────────────────────────────────────
from wpup.cli.commands import serve, config  # noqa: E402

app.command(name="serve", help="Run the update API with uvicorn")(serve.serve)
app.command(name="config", help="Show resolved configuration")(config.config_show)

# ── Packages ───────────────────────────────────────────────────────────────────
from wpup.cli.commands import inspect  # noqa: E402

app.command(name="inspect", help="Parse a plugin or theme ZIP and show its metadata")(inspect.inspect_package)

# ── Cache ──────────────────────────────────────────────────────────────────────
from wpup.cli.commands import cache as cache_cmd  # noqa: E402

cache_app = typer.Typer(name="cache", help="Metadata cache commands.")
cache_app.command("purge", help="Delete expired or unreadable cache entries")(cache_cmd.cache_purge)
app.add_typer(cache_app)


if __name__ == "__main__":
    app()
