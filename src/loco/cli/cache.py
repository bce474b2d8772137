"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer

from ..config import load_config
from ..exceptions import LocoError
from . import app
from ._common import console, open_cache


def _load(config: Optional[Path]):
    try:
        return load_config(config_file=config)
    except LocoError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def cache_info(
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Configuration file (TOML)"),
):
    """Show cache location and statistics."""
    cfg = _load(config)
    cache = open_cache(cfg, enabled=True)
    try:
        stats = cache.stats()
    finally:
        cache.close()

    console.print("[bold cyan]Loco Cache Info[/bold cyan]")
    console.print()

    if "error" in stats:
        console.print(f"[red]Error:[/red] {stats['error']}")
        raise typer.Exit(1)

    status = "[green]Enabled[/green]" if cfg.cache_enabled else "[yellow]Disabled (use --cache)[/yellow]"
    console.print(f"Status: {status}")
    console.print(f"Directory: [blue]{stats.get('directory', 'N/A')}[/blue]")
    console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
    console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")
    console.print(f"TTL: [yellow]{cfg.cache_ttl_hours}h[/yellow]")


@app.command()
def cache_clear(
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Configuration file (TOML)"),
):
    """Remove every cached FileMetric."""
    cfg = _load(config)
    cache = open_cache(cfg, enabled=True)
    try:
        cache.clear()
    finally:
        cache.close()
    console.print("[green]Cache cleared successfully[/green]")
