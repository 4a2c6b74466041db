"""Deterministic stand-in data used when GitHub cannot be reached.

The dashboard must always have something well-formed to show. This series
mirrors a typical recent history of the nightly workflow: four clean days,
one failure, then five more clean days, one run per day.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from nightlens_core.models import FAILURE, SUCCESS, BuildRecord

PLACEHOLDER_RUNS = 10
PLACEHOLDER_FAILURE_OFFSET = 4
PLACEHOLDER_LATEST_RUN = 672
PLACEHOLDER_TOTAL_COUNT = 672


def placeholder_series(now: datetime, repo: str = "langflow-ai/langflow") -> tuple[list[BuildRecord], int]:
    """Return (builds, provider_total_count) for a fixed synthetic history ending at now."""
    builds = []
    for i in range(PLACEHOLDER_RUNS):
        outcome = FAILURE if i == PLACEHOLDER_FAILURE_OFFSET else SUCCESS
        run_number = PLACEHOLDER_LATEST_RUN - i
        builds.append(
            BuildRecord(
                timestamp=now - timedelta(days=i),
                outcome=outcome,
                run_number=run_number,
                source_conclusion=outcome,
                url=f"https://github.com/{repo}/actions/runs/{run_number}",
            )
        )
    return builds, PLACEHOLDER_TOTAL_COUNT
