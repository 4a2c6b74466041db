"""Tests for the cache-or-fetch dashboard load cycle and the placeholder series."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from nightlens_core.dashboard import (
    SOURCE_CACHE,
    SOURCE_GITHUB,
    SOURCE_PLACEHOLDER,
    load_dashboard,
    refresh_countdown,
)
from nightlens_core.gh.workflow_runs import FetchErr, FetchOk
from nightlens_core.models import FAILURE, SUCCESS, BuildRecord
from nightlens_core.placeholder import placeholder_series
from nightlens_core.schedule import CachePolicy
from nightlens_core.stats import compute_statistics
from nightlens_store.memory import MemoryStore
from nightlens_store.noop import NoOpStore

LOCAL = timezone(timedelta(hours=2))
NOW = datetime(2026, 10, 17, 8, 0, tzinfo=LOCAL)


def _real_builds(n: int = 12) -> list[BuildRecord]:
    return [
        BuildRecord(
            timestamp=NOW - timedelta(days=i, hours=5),
            outcome=FAILURE if i == 1 else SUCCESS,
            run_number=900 - i,
            source_conclusion="failure" if i == 1 else "success",
        )
        for i in range(n)
    ]


class TestPlaceholderSeries:
    def test_shape(self):
        builds, total = placeholder_series(NOW)

        assert total == 672
        assert len(builds) == 10
        assert [b.outcome for b in builds] == [SUCCESS] * 4 + [FAILURE] + [SUCCESS] * 5
        assert [b.run_number for b in builds] == list(range(672, 662, -1))
        assert builds[0].timestamp == NOW
        assert builds[9].timestamp == NOW - timedelta(days=9)

    def test_deterministic(self):
        assert placeholder_series(NOW) == placeholder_series(NOW)

    def test_urls_use_repo(self):
        builds, _ = placeholder_series(NOW, repo="owner/name")
        assert builds[0].url == "https://github.com/owner/name/actions/runs/672"

    def test_statistics(self):
        builds, total = placeholder_series(NOW)
        stats = compute_statistics(builds, total, now=NOW)

        assert stats.days_without_incident == 4
        assert stats.current_streak == 4
        assert stats.last_incident_date == NOW - timedelta(days=4)
        assert stats.total_builds == 672
        assert stats.success_rate == 90.0


class TestLoadDashboard:
    def test_fetches_and_caches_on_miss(self):
        store = MemoryStore()
        policy = CachePolicy(store)
        builds = _real_builds()
        fetch = MagicMock(return_value=FetchOk(builds=builds, total_count=900))

        data = load_dashboard(policy, fetch, NOW)

        fetch.assert_called_once_with()
        assert data.source == SOURCE_GITHUB
        assert data.fetch_error is None
        assert data.statistics == compute_statistics(builds, 900, now=NOW)
        assert len(data.builds) == 10
        assert data.builds[0].run_number == 900
        assert data.next_refresh_at == datetime(2026, 10, 17, 13, 0, tzinfo=LOCAL)
        assert data.next_refresh_in == "5h 0m"
        assert policy.load_valid_snapshot(NOW) is not None

    def test_cache_hit_skips_fetch(self):
        policy = CachePolicy(MemoryStore())
        first = load_dashboard(policy, MagicMock(return_value=FetchOk(_real_builds(), 900)), NOW)
        fetch = MagicMock()

        later = NOW + timedelta(hours=3)
        data = load_dashboard(policy, fetch, later)

        fetch.assert_not_called()
        assert data.source == SOURCE_CACHE
        assert data.statistics == first.statistics
        assert data.builds == first.builds
        assert data.next_refresh_in == "2h 0m"

    def test_expired_cache_refetches(self):
        policy = CachePolicy(MemoryStore())
        load_dashboard(policy, MagicMock(return_value=FetchOk(_real_builds(), 900)), NOW)
        fetch = MagicMock(return_value=FetchOk(_real_builds(3), 901))

        data = load_dashboard(policy, fetch, NOW + timedelta(hours=5))

        fetch.assert_called_once()
        assert data.source == SOURCE_GITHUB
        assert data.statistics.total_builds == 901

    def test_fetch_error_uses_placeholder(self):
        policy = CachePolicy(MemoryStore())
        fetch = MagicMock(return_value=FetchErr("Network error (ConnectionError)"))

        data = load_dashboard(policy, fetch, NOW)

        builds, total = placeholder_series(NOW)
        assert data.source == SOURCE_PLACEHOLDER
        assert data.fetch_error == "Network error (ConnectionError)"
        assert data.statistics == compute_statistics(builds, total, now=NOW)
        assert data.builds == builds

    def test_placeholder_result_is_cached(self):
        policy = CachePolicy(MemoryStore())
        load_dashboard(policy, MagicMock(return_value=FetchErr("boom")), NOW)
        fetch = MagicMock()

        data = load_dashboard(policy, fetch, NOW + timedelta(minutes=10))

        fetch.assert_not_called()
        assert data.source == SOURCE_CACHE
        assert data.statistics.days_without_incident == 4

    def test_empty_fetch_gives_empty_statistics(self):
        policy = CachePolicy(MemoryStore())
        data = load_dashboard(policy, MagicMock(return_value=FetchOk(builds=[], total_count=0)), NOW)

        assert data.statistics.total_builds == 0
        assert data.statistics.success_rate == 0.0
        assert data.statistics.last_incident_date is None
        assert data.builds == []

    def test_noop_store_always_fetches(self):
        policy = CachePolicy(NoOpStore())
        fetch = MagicMock(return_value=FetchOk(_real_builds(), 900))

        load_dashboard(policy, fetch, NOW)
        load_dashboard(policy, fetch, NOW + timedelta(minutes=1))

        assert fetch.call_count == 2


def test_refresh_countdown_does_not_touch_store():
    store = MagicMock()
    policy = CachePolicy(store)

    assert refresh_countdown(policy, NOW + timedelta(minutes=30)) == "4h 30m"
    store.get.assert_not_called()
    store.set.assert_not_called()
