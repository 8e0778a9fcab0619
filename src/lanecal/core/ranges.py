"""Instant and half-open range arithmetic.

Every helper keeps the ``tzinfo`` of the instant it is given: a day starts at
midnight on the instant's own wall clock and no zone conversion happens here.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(weeks=1)


def start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(instant: datetime) -> datetime:
    """Exclusive end of the instant's day, i.e. the following midnight."""

    return start_of_day(instant) + ONE_DAY


def start_of_week(instant: datetime, week_start: int = SUNDAY) -> datetime:
    offset = (instant.weekday() - week_start) % 7
    return start_of_day(instant) - timedelta(days=offset)


def end_of_week(instant: datetime, week_start: int = SUNDAY) -> datetime:
    return start_of_week(instant, week_start) + ONE_WEEK


def start_of_month(instant: datetime) -> datetime:
    return start_of_day(instant).replace(day=1)


def last_day_of_month(instant: datetime) -> datetime:
    days = calendar.monthrange(instant.year, instant.month)[1]
    return start_of_day(instant).replace(day=days)


def add_days(instant: datetime, days: int) -> datetime:
    return instant + timedelta(days=days)


def add_weeks(instant: datetime, weeks: int) -> datetime:
    return instant + timedelta(weeks=weeks)


def add_months(instant: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's length."""

    index = instant.month - 1 + months
    year = instant.year + index // 12
    month = index % 12 + 1
    day = min(instant.day, calendar.monthrange(year, month)[1])
    return instant.replace(year=year, month=month, day=day)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Strict overlap of ``[a_start, a_end)`` and ``[b_start, b_end)``; touching ends do not count."""

    return a_start < b_end and a_end > b_start


@dataclass(frozen=True, slots=True)
class TimeRange:
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def clamp(self, instant: datetime) -> datetime:
        return min(max(instant, self.start), self.end)

    def overlaps(self, other: "TimeRange") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)

    def intersection(self, other: "TimeRange") -> Optional["TimeRange"]:
        if not self.overlaps(other):
            return None
        return TimeRange(max(self.start, other.start), min(self.end, other.end))

    def days(self) -> list[datetime]:
        """Start-of-day instants for every day touched by the range."""

        collected: list[datetime] = []
        current = start_of_day(self.start)
        while current < self.end:
            collected.append(current)
            current = add_days(current, 1)
        return collected
