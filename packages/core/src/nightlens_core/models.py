"""Build and statistics data models.

Everything here is immutable and JSON-compatible through to_dict/from_dict,
because a CacheSnapshot is persisted as a single JSON string in the store.
from_dict raises ValueError for any shape mismatch so the cache policy can
treat every kind of bad payload as one parse failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

SUCCESS = "success"
FAILURE = "failure"


def normalize_conclusion(conclusion: str | None) -> str:
    """Collapse a provider conclusion into success/failure.

    GitHub reports cancelled, timed_out, skipped, action_required, etc.
    Anything that is not an explicit success counts as an incident.
    """
    return SUCCESS if conclusion == SUCCESS else FAILURE


def _parse_timestamp(value) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"expected ISO-8601 string, got {type(value).__name__}")
    # fromisoformat() only accepts a trailing "Z" from Python 3.11 on.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp {value!r} has no UTC offset")
    return parsed


@dataclass(frozen=True)
class BuildRecord:
    """One completed run of the monitored workflow."""

    timestamp: datetime  # run creation time, timezone-aware
    outcome: str  # "success" | "failure"
    run_number: int
    source_conclusion: str | None = None  # raw provider conclusion, display only
    url: str | None = None

    @property
    def is_success(self) -> bool:
        return self.outcome == SUCCESS

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "outcome": self.outcome,
            "run_number": self.run_number,
            "source_conclusion": self.source_conclusion,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, d: dict) -> BuildRecord:
        try:
            outcome = d["outcome"]
            if outcome not in (SUCCESS, FAILURE):
                raise ValueError(f"unknown outcome {outcome!r}")
            return cls(
                timestamp=_parse_timestamp(d["timestamp"]),
                outcome=outcome,
                run_number=int(d["run_number"]),
                source_conclusion=d.get("source_conclusion"),
                url=d.get("url"),
            )
        except (KeyError, TypeError, AttributeError, OverflowError) as e:
            raise ValueError(f"malformed build record: {e}") from e


@dataclass(frozen=True)
class Statistics:
    """Summary shown on the dashboard, derived from a batch of BuildRecords."""

    days_without_incident: int = 0
    last_incident_date: datetime | None = None
    total_builds: int = 0
    success_rate: float = 0.0  # percentage, 0..100
    current_streak: int = 0

    @classmethod
    def empty(cls) -> Statistics:
        return cls()

    def to_dict(self) -> dict:
        return {
            "days_without_incident": self.days_without_incident,
            "last_incident_date": self.last_incident_date.isoformat() if self.last_incident_date else None,
            "total_builds": self.total_builds,
            "success_rate": self.success_rate,
            "current_streak": self.current_streak,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Statistics:
        try:
            last = d["last_incident_date"]
            return cls(
                days_without_incident=int(d["days_without_incident"]),
                last_incident_date=_parse_timestamp(last) if last is not None else None,
                total_builds=int(d["total_builds"]),
                success_rate=float(d["success_rate"]),
                current_streak=int(d["current_streak"]),
            )
        except (KeyError, TypeError, OverflowError) as e:
            raise ValueError(f"malformed statistics: {e}") from e


@dataclass(frozen=True)
class CacheSnapshot:
    """The single persisted unit: statistics plus the builds shown alongside them."""

    statistics: Statistics
    fetched_at: datetime
    next_refresh_at: datetime
    builds: tuple[BuildRecord, ...] = field(default_factory=tuple)

    def is_valid_at(self, now: datetime) -> bool:
        return now < self.next_refresh_at

    def to_dict(self) -> dict:
        return {
            "statistics": self.statistics.to_dict(),
            "builds": [b.to_dict() for b in self.builds],
            "fetched_at": self.fetched_at.isoformat(),
            "next_refresh_at": self.next_refresh_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> CacheSnapshot:
        if not isinstance(d, dict):
            raise ValueError(f"expected a JSON object, got {type(d).__name__}")
        try:
            return cls(
                statistics=Statistics.from_dict(d["statistics"]),
                builds=tuple(BuildRecord.from_dict(b) for b in d["builds"]),
                fetched_at=_parse_timestamp(d["fetched_at"]),
                next_refresh_at=_parse_timestamp(d["next_refresh_at"]),
            )
        except (KeyError, TypeError, OverflowError) as e:
            raise ValueError(f"malformed cache snapshot: {e}") from e
