"""Display windows: "today" and "this week", in local time.

Boundaries are recomputed from the wall clock on every call so lists roll
over at midnight without any cache to invalidate.
"""

from datetime import datetime, timedelta
from enum import Enum


class Window(Enum):
    TODAY = "today"
    WEEK = "week"


def _to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _local_midnight(now: datetime | None) -> datetime:
    now = now or datetime.now()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_today(now: datetime | None = None) -> int:
    """Local midnight of the current day, in epoch milliseconds."""
    return _to_ms(_local_midnight(now))


def start_of_week(now: datetime | None = None) -> int:
    """Local midnight of the most recent Monday (six days back on a Sunday)."""
    midnight = _local_midnight(now)
    return _to_ms(midnight - timedelta(days=midnight.weekday()))


def window_start(window: Window, now: datetime | None = None) -> int:
    if window is Window.TODAY:
        return start_of_today(now)
    return start_of_week(now)


def filter_since(entries, threshold: int) -> list:
    return [entry for entry in entries if (entry.timestamp or 0) >= threshold]


def newest_first(entries) -> list:
    return sorted(entries, key=lambda entry: entry.timestamp or 0, reverse=True)


def oldest_first(entries) -> list:
    return sorted(entries, key=lambda entry: entry.timestamp or 0)
