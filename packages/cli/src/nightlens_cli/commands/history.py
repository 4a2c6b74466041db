"""history command — recent nightly builds."""

from __future__ import annotations

import click

from nightlens_cli.commands.show import load_or_exit, local_now
from nightlens_cli.render import console, render_builds
from nightlens_core.schedule import DISPLAY_LIMIT


@click.command("history")
@click.option(
    "--limit",
    default=DISPLAY_LIMIT,
    show_default=True,
    type=click.IntRange(1, DISPLAY_LIMIT),
    help="Maximum number of builds to show.",
)
@click.pass_context
def history_cmd(ctx, limit: int):
    """Show the most recent nightly builds, newest first.

    Uses the same cache as `nightlens show`, so it does not hit GitHub
    again before the next scheduled refresh.
    """
    data = load_or_exit(ctx, local_now())
    console.print(f"\n[bold]Nightly builds for [cyan]{ctx.obj['config']['repo']}[/cyan][/bold] ({data.source})")
    render_builds(data.builds, limit=limit)
