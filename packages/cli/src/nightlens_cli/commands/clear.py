"""clear-cache command — forget the cached snapshot."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.command("clear-cache")
@click.pass_context
def clear_cache_cmd(ctx):
    """Delete the cached snapshot. The next `show` fetches from GitHub."""
    policy = ctx.obj["policy"]
    policy.invalidate()
    console.print(f"[green]Cleared cached data ({policy.key}).[/green]")
