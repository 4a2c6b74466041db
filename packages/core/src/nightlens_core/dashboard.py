"""Dashboard load orchestration.

    cache hit  → snapshot statistics + builds
    cache miss → fetch() → FetchOk  → compute_statistics → store_snapshot
                         → FetchErr → placeholder_series → compute_statistics → store_snapshot

Rendering is not done here; the CLI consumes DashboardData.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from nightlens_core.gh.workflow_runs import FetchErr, FetchResult
from nightlens_core.models import BuildRecord, Statistics
from nightlens_core.placeholder import placeholder_series
from nightlens_core.schedule import CachePolicy
from nightlens_core.stats import compute_statistics

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_GITHUB = "github"
SOURCE_PLACEHOLDER = "placeholder"


@dataclass
class DashboardData:
    """Everything the presentation layer needs for one render."""

    statistics: Statistics
    fetched_at: datetime
    next_refresh_at: datetime
    next_refresh_in: str
    source: str  # "cache" | "github" | "placeholder"
    builds: list[BuildRecord] = field(default_factory=list)
    fetch_error: str | None = None


def load_dashboard(
    policy: CachePolicy,
    fetch: Callable[[], FetchResult],
    now: datetime,
    repo: str = "langflow-ai/langflow",
) -> DashboardData:
    """Serve a valid cached snapshot, or fetch, compute and cache a new one."""
    cached = policy.load_valid_snapshot(now)
    if cached is not None:
        return DashboardData(
            statistics=cached.statistics,
            builds=list(cached.builds),
            fetched_at=cached.fetched_at,
            next_refresh_at=cached.next_refresh_at,
            next_refresh_in=policy.time_until_next_refresh(now),
            source=SOURCE_CACHE,
        )

    logger.info("Fetching fresh data from GitHub API...")
    result = fetch()
    fetch_error = None
    if isinstance(result, FetchErr):
        logger.warning("Falling back to placeholder data: %s", result.reason)
        builds, total_count = placeholder_series(now, repo=repo)
        source = SOURCE_PLACEHOLDER
        fetch_error = result.reason
    else:
        builds, total_count = result.builds, result.total_count
        source = SOURCE_GITHUB

    statistics = compute_statistics(builds, total_count, now=now)
    snapshot = policy.store_snapshot(statistics, builds, now)
    logger.info("Data updated. Next scheduled update: %s", snapshot.next_refresh_at.isoformat())

    return DashboardData(
        statistics=statistics,
        builds=list(snapshot.builds),
        fetched_at=snapshot.fetched_at,
        next_refresh_at=snapshot.next_refresh_at,
        next_refresh_in=policy.time_until_next_refresh(now),
        source=source,
        fetch_error=fetch_error,
    )


def refresh_countdown(policy: CachePolicy, now: datetime) -> str:
    """Recompute the "next update in" label without touching the store or GitHub."""
    return policy.time_until_next_refresh(now)
