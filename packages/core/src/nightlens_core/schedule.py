"""Refresh schedule and the cache policy built on top of it.

GitHub is only asked for new data a few times a day. Between the configured
refresh hours the last computed snapshot is served from the store:

    load_valid_snapshot(now) → hit  → render cached statistics
                             → miss → fetch → compute → store_snapshot(now)

A snapshot written at time T stays valid until next_refresh_time(T), the
first configured hour strictly after T. The store is never trusted: a read
error or an unparsable payload is a miss, and a write error only costs a
refetch on the next run.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterable, Sequence

from nightlens_core.models import BuildRecord, CacheSnapshot, Statistics
from nightlens_core.stats import sort_newest_first

if TYPE_CHECKING:
    from nightlens_store.base import BaseStore

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_HOURS = (6, 13, 19, 23)
DEFAULT_CACHE_KEY = "langflow_incident_data"
DISPLAY_LIMIT = 10


def _hour_label(hour: int) -> str:
    suffix = "am" if hour < 12 else "pm"
    return f"{hour % 12 or 12}{suffix}"


def format_duration(delta: timedelta) -> str:
    """Render a countdown as "<H>h <M>m", or "<M>m" when under an hour."""
    total_minutes = max(0, int(delta.total_seconds() // 60))
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


class RefreshSchedule:
    """A fixed set of local hours-of-day at which fresh data may be fetched."""

    def __init__(self, hours: Iterable[int] = DEFAULT_REFRESH_HOURS, system_local: bool = False):
        hours = list(hours)
        if not hours:
            raise ValueError("refresh_hours must contain at least one hour.")
        for hour in hours:
            if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
                raise ValueError(f"Invalid refresh hour: {hour!r}. Expected an integer from 0 to 23.")
        self.hours: tuple[int, ...] = tuple(sorted(set(hours)))
        self.system_local = system_local

    def next_refresh_time(self, now: datetime) -> datetime:
        """Return the first refresh hour strictly after now, rolling over to tomorrow.

        Hours are wall-clock hours. With system_local=True they are hours of
        the machine's local time and the result carries the UTC offset in
        force at that moment, so a refresh across a DST change still lands
        on the configured hour. Otherwise they are read in now's own tzinfo:
        a zoneinfo zone tracks DST, a fixed-offset timezone does not.
        """
        if self.system_local:
            now = now.astimezone()
        wall = now.replace(tzinfo=None)
        for hour in self.hours:
            candidate = wall.replace(hour=hour, minute=0, second=0, microsecond=0)
            if candidate > wall:
                return self._localize(candidate, now)
        tomorrow = (wall + timedelta(days=1)).replace(hour=self.hours[0], minute=0, second=0, microsecond=0)
        return self._localize(tomorrow, now)

    def _localize(self, wall: datetime, now: datetime) -> datetime:
        if self.system_local:
            # naive astimezone() resolves the local offset for that date
            return wall.astimezone()
        return wall.replace(tzinfo=now.tzinfo)

    def time_until(self, now: datetime) -> timedelta:
        return self.next_refresh_time(now) - now

    def describe(self) -> str:
        """Human label for the schedule, e.g. "6am, 1pm, 7pm & 11pm"."""
        labels = [_hour_label(h) for h in self.hours]
        if len(labels) == 1:
            return labels[0]
        return f"{', '.join(labels[:-1])} & {labels[-1]}"


class CachePolicy:
    """Gates remote fetches to the refresh schedule using a single store key."""

    def __init__(self, store: BaseStore, schedule: RefreshSchedule | None = None, key: str = DEFAULT_CACHE_KEY):
        self.store = store
        self.schedule = schedule or RefreshSchedule()
        self.key = key

    def load_valid_snapshot(self, now: datetime) -> CacheSnapshot | None:
        """Return the persisted snapshot if it is still inside its refresh window.

        Never raises. Anything other than a current, well-formed snapshot
        comes back as None.
        """
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.warning("Cache read failed (%s): %s", type(e).__name__, e)
            return None
        if raw is None:
            return None

        try:
            snapshot = CacheSnapshot.from_dict(json.loads(raw))
        except ValueError as e:
            logger.debug("Ignoring invalid cache data under %r: %s", self.key, e)
            return None

        try:
            valid = snapshot.is_valid_at(now)
        except TypeError as e:
            # naive vs aware datetimes
            logger.debug("Cannot compare cached refresh time with now: %s", e)
            return None

        if not valid:
            logger.info("Cached data expired at %s", snapshot.next_refresh_at.isoformat())
            return None
        logger.info("Using cached data. Next update: %s", snapshot.next_refresh_at.isoformat())
        return snapshot

    def store_snapshot(self, statistics: Statistics, builds: Sequence[BuildRecord], now: datetime) -> CacheSnapshot:
        """Persist a fresh snapshot valid until the next refresh hour and return it.

        Only the newest DISPLAY_LIMIT builds are kept. A failing store is
        logged and otherwise ignored; the returned snapshot is still usable.
        """
        snapshot = CacheSnapshot(
            statistics=statistics,
            builds=tuple(sort_newest_first(builds)[:DISPLAY_LIMIT]),
            fetched_at=now,
            next_refresh_at=self.schedule.next_refresh_time(now),
        )
        try:
            self.store.set(self.key, json.dumps(snapshot.to_dict()))
        except Exception as e:
            logger.warning("Failed to save to cache (%s): %s", type(e).__name__, e)
        return snapshot

    def invalidate(self) -> None:
        try:
            self.store.delete(self.key)
        except Exception as e:
            logger.warning("Failed to clear cache (%s): %s", type(e).__name__, e)

    def time_until_next_refresh(self, now: datetime) -> str:
        return format_duration(self.schedule.time_until(now))
