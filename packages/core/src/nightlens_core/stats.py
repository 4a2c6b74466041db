"""Incident statistics for a batch of nightly build records."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from nightlens_core.models import BuildRecord, Statistics

_ONE_DAY = timedelta(days=1)


def sort_newest_first(builds: Iterable[BuildRecord]) -> list[BuildRecord]:
    """Return builds ordered by timestamp descending. Ties keep their input order."""
    return sorted(builds, key=lambda b: b.timestamp, reverse=True)


def _age_in_days(now: datetime, timestamp: datetime) -> int:
    """Whole days elapsed, counting the day of the build itself as day one."""
    return (now - timestamp) // _ONE_DAY + 1


def compute_statistics(
    builds: Iterable[BuildRecord],
    provider_total_count: int | None = None,
    now: datetime | None = None,
) -> Statistics:
    """Derive dashboard statistics from an unordered batch of build records.

    - current_streak: successes counted from the newest build until the first failure.
    - last_incident_date: timestamp of the newest failure, or None if there is none.
    - days_without_incident: the largest age (in days, +1) of any build newer than
      the newest failure. With no failure at all it is the age of the oldest
      build: "at least this many days", bounded by the fetched window.
    - success_rate: percentage of successful builds, 0 for an empty batch.
    - total_builds: provider_total_count when it is known and non-zero.
    """
    now = now or datetime.now().astimezone()
    ordered = sort_newest_first(builds)
    if not ordered:
        return Statistics.empty()

    streak = 0
    for build in ordered:
        if not build.is_success:
            break
        streak += 1

    days_without_incident = 0
    last_incident_date = None
    for build in ordered:
        if not build.is_success:
            last_incident_date = build.timestamp
            break
        days_without_incident = max(days_without_incident, _age_in_days(now, build.timestamp))

    if last_incident_date is None:
        days_without_incident = max(0, _age_in_days(now, ordered[-1].timestamp))

    successes = sum(1 for b in ordered if b.is_success)
    success_rate = successes / len(ordered) * 100

    return Statistics(
        days_without_incident=days_without_incident,
        last_incident_date=last_incident_date,
        total_builds=provider_total_count or len(ordered),
        success_rate=success_rate,
        current_streak=streak,
    )
