"""
UTC calendar windows used to scope the daily check-in limit.

Queries use created_at >= start AND created_at < end.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


def _iso_z(dt: datetime) -> str:
    """Millisecond ISO 8601 with a Z suffix, e.g. 2024-05-01T00:00:00.000Z."""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class DayBounds:
    start: datetime
    end: datetime

    @property
    def start_iso(self) -> str:
        return _iso_z(self.start)

    @property
    def end_iso(self) -> str:
        return _iso_z(self.end)


def _utc_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def utc_day_bounds(now: datetime | None = None) -> DayBounds:
    """Return [midnight UTC today, midnight UTC tomorrow)."""
    current = _utc_now(now)
    start = datetime(current.year, current.month, current.day, tzinfo=timezone.utc)
    return DayBounds(start=start, end=start + timedelta(days=1))

