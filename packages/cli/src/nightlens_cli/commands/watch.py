"""watch command — render once, then tick the refresh countdown."""

from __future__ import annotations

import time

import click

from nightlens_cli.commands.show import load_or_exit, local_now
from nightlens_cli.render import console, render_builds, render_countdown, render_footer, render_statistics
from nightlens_core.dashboard import refresh_countdown


@click.command("watch")
@click.option("--interval", default=60, show_default=True, type=click.IntRange(min=1), help="Seconds between countdown updates.")
@click.option("--ticks", default=0, show_default=True, type=click.IntRange(min=0), help="Stop after this many updates (0 = run until interrupted).")
@click.pass_context
def watch_cmd(ctx, interval: int, ticks: int):
    """Show the dashboard and keep the "next update in" countdown current.

    The countdown is recomputed from the refresh schedule only; data is not
    re-fetched while watching. Restart the command to pick up new data.
    """
    config = ctx.obj["config"]
    policy = ctx.obj["policy"]
    schedule_label = policy.schedule.describe()

    data = load_or_exit(ctx, local_now())
    render_statistics(data, config["repo"])
    render_builds(data.builds)
    render_footer(data, config, schedule_label)

    count = 0
    try:
        while ticks == 0 or count < ticks:
            time.sleep(interval)
            render_countdown(schedule_label, refresh_countdown(policy, local_now()))
            count += 1
    except KeyboardInterrupt:
        console.print("\nStopped watching.")
