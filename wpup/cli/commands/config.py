"""wpup config — Show resolved wpup configuration."""

from rich import box
from rich.console import Console
from rich.table import Table

console = Console()


def config_show():
    """Show the resolved wpup configuration.

    Reads from environment variables and .env file. Directories that are
    not set explicitly are shown as resolved under WPUP_SERVER_DIR.

    Example:
        wpup config
    """
    from wpup.config import WpupConfig
    cfg = WpupConfig()

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title="[bold]wpup Configuration[/bold]",
    )
    table.add_column("Key", style="cyan", width=22)
    table.add_column("Value", width=50)
    table.add_column("Env Var", style="dim", width=26)

    sections = [
        ("App", ["debug", "log_level"]),
        ("Directories", ["server_dir", "packages_dir", "cache_dir", "logs_dir", "banners_dir", "icons_dir"]),
        ("Server", ["server_url", "host", "port", "download_max_age"]),
        ("Metadata Cache", ["cache_enabled", "metadata_cache_ttl"]),
        ("Request Log", ["log_requests", "log_rotation", "log_backup_count", "anonymize_ips"]),
    ]

    first = True
    for section_name, fields in sections:
        if not first:
            table.add_row("", "", "")
        first = False
        table.add_row(f"[bold dim]── {section_name} ──[/bold dim]", "", "")
        for attr in fields:
            val = getattr(cfg, attr, None)
            display = "[dim](not set)[/dim]" if val is None else str(val)
            table.add_row(f"  {attr}", display, f"WPUP_{attr.upper()}")

    console.print()
    console.print(table)
    console.print()
    console.print("[dim]Source: environment variables + .env file (prefix: WPUP_)[/dim]")
