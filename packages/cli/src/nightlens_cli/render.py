"""Rich rendering of dashboard data, shared by the show/history/watch commands."""

from __future__ import annotations

from datetime import datetime

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nightlens_core.config import workflow_url
from nightlens_core.dashboard import SOURCE_CACHE, SOURCE_PLACEHOLDER, DashboardData
from nightlens_core.models import BuildRecord

console = Console()

FAILED_TO_LOAD = "Failed to load build status"

_outcome_style = {"success": "green", "failure": "red"}


def format_long_date(value: datetime) -> str:
    """Local calendar date, e.g. "October 13, 2026"."""
    value = value.astimezone()
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_short_date(value: datetime) -> str:
    """e.g. "Oct 13"."""
    value = value.astimezone()
    return f"{value.strftime('%b')} {value.day}"


def render_statistics(data: DashboardData, repo: str) -> None:
    stats = data.statistics
    console.print(
        Panel(
            Align.center(f"[bold white]{stats.days_without_incident}[/bold white]"),
            title="Days Without [magenta]Incident[/magenta]",
            subtitle=f"{repo} nightly builds",
        )
    )

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Success Rate", justify="right")
    table.add_column("Total Builds", justify="right")
    table.add_column("Current Streak", justify="right")
    table.add_column("Last Incident")
    table.add_row(
        f"{stats.success_rate:.1f}%",
        str(stats.total_builds),
        str(stats.current_streak),
        format_long_date(stats.last_incident_date) if stats.last_incident_date else "Never",
    )
    console.print(table)


def render_builds(builds: list[BuildRecord], limit: int = 10) -> None:
    if not builds:
        console.print("[yellow]No builds found.[/yellow]")
        return

    table = Table(title="Recent Builds", show_header=True, header_style="bold cyan")
    table.add_column("Run", style="bold", width=6)
    table.add_column("Date", width=8)
    table.add_column("Status", width=10)
    table.add_column("Conclusion", width=12)
    table.add_column("URL", overflow="fold")

    for b in builds[:limit]:
        style = _outcome_style.get(b.outcome, "white")
        table.add_row(
            f"#{b.run_number}",
            format_short_date(b.timestamp),
            f"[{style}]{b.outcome}[/{style}]",
            b.source_conclusion or "",
            b.url or "",
        )
    console.print(table)


def render_footer(data: DashboardData, config: dict, schedule_label: str) -> None:
    if data.source == SOURCE_PLACEHOLDER:
        console.print(f"[yellow]GitHub unavailable ({data.fetch_error}); showing placeholder data.[/yellow]")
    elif data.source == SOURCE_CACHE:
        console.print(f"[dim]Cached at {data.fetched_at.strftime('%Y-%m-%d %H:%M')}[/dim]")
    console.print(f"Monitoring [link={workflow_url(config)}]{config['repo']}[/link] nightly builds")
    render_countdown(schedule_label, data.next_refresh_in)


def render_countdown(schedule_label: str, next_refresh_in: str) -> None:
    console.print(f"[dim]Data updates at {schedule_label} • Next update in: {next_refresh_in}[/dim]")
