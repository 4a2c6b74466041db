"""show command — the full dashboard."""

from __future__ import annotations

import logging
from datetime import datetime

import click

from nightlens_cli.render import FAILED_TO_LOAD, console, render_builds, render_footer, render_statistics
from nightlens_core.dashboard import DashboardData, load_dashboard
from nightlens_core.gh.workflow_runs import fetch_workflow_runs

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    return datetime.now().astimezone()


def load_for_context(ctx: click.Context, now: datetime) -> DashboardData:
    """Run the cache-or-fetch cycle with the policy and config built by the group."""
    config = ctx.obj["config"]
    policy = ctx.obj["policy"]

    def fetch():
        return fetch_workflow_runs(
            config["repo"],
            config["workflow"],
            config["workflow_path_hint"],
            per_page=config["per_page"],
        )

    return load_dashboard(policy, fetch, now, repo=config["repo"])


def load_or_exit(ctx: click.Context, now: datetime) -> DashboardData:
    """Load dashboard data, or print the generic failure message and exit 1."""
    try:
        return load_for_context(ctx, now)
    except Exception as e:
        logger.debug("Dashboard load failed", exc_info=True)
        console.print(f"[red]⚠️ {FAILED_TO_LOAD}[/red] [dim]({type(e).__name__}: {e})[/dim]")
        ctx.exit(1)


@click.command("show")
@click.option("--refresh", is_flag=True, help="Ignore the cached snapshot and fetch from GitHub now.")
@click.pass_context
def show_cmd(ctx, refresh: bool):
    """Show days without incident and recent nightly builds.

    Data comes from the local cache until the next scheduled refresh hour,
    then from the GitHub Actions API. When GitHub cannot be reached a fixed
    placeholder history is shown instead.
    """
    config = ctx.obj["config"]
    policy = ctx.obj["policy"]

    if refresh:
        policy.invalidate()

    data = load_or_exit(ctx, local_now())

    render_statistics(data, config["repo"])
    render_builds(data.builds)
    render_footer(data, config, policy.schedule.describe())
