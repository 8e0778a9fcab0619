from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List

from ..domain.enums import CalendarView
from .ranges import (
    SUNDAY,
    TimeRange,
    add_days,
    add_months,
    add_weeks,
    end_of_day,
    end_of_week,
    last_day_of_month,
    start_of_day,
    start_of_month,
    start_of_week,
)


@dataclass(frozen=True, slots=True)
class ViewRange(TimeRange):
    view: CalendarView = CalendarView.MONTH


def window_for(anchor: datetime, view: CalendarView, *, week_start: int = SUNDAY) -> ViewRange:
    """Half-open display range of ``view`` around ``anchor``.

    Month windows are padded out to whole weeks so the grid stays rectangular.
    """

    view = CalendarView(view)
    if view is CalendarView.DAY:
        return ViewRange(start_of_day(anchor), end_of_day(anchor), view)
    if view is CalendarView.WEEK:
        return ViewRange(start_of_week(anchor, week_start), end_of_week(anchor, week_start), view)
    first = start_of_week(start_of_month(anchor), week_start)
    last = end_of_week(last_day_of_month(anchor), week_start)
    return ViewRange(first, last, view)


def step(anchor: datetime, view: CalendarView, direction: int) -> datetime:
    if direction not in (1, -1):
        raise ValueError(f"direction must be +1 or -1, got {direction!r}")
    view = CalendarView(view)
    if view is CalendarView.DAY:
        return add_days(anchor, direction)
    if view is CalendarView.WEEK:
        return add_weeks(anchor, direction)
    return add_months(anchor, direction)


def previous(anchor: datetime, view: CalendarView) -> datetime:
    return step(anchor, view, -1)


def following(anchor: datetime, view: CalendarView) -> datetime:
    return step(anchor, view, 1)


def today(now: datetime) -> datetime:
    return start_of_day(now)


def week_days(anchor: datetime, *, week_start: int = SUNDAY) -> List[datetime]:
    first = start_of_week(anchor, week_start)
    return [add_days(first, index) for index in range(7)]


def view_label(anchor: datetime, view: CalendarView, *, week_start: int = SUNDAY) -> str:
    view = CalendarView(view)
    if view is CalendarView.DAY:
        return f"{anchor:%A}, {anchor:%B} {anchor.day}"
    if view is CalendarView.WEEK:
        first = start_of_week(anchor, week_start)
        last = add_days(first, 6)
        if (first.year, first.month) == (last.year, last.month):
            return f"{first:%B} {first.day} – {last.day}, {last.year}"
        if first.year == last.year:
            return f"{first:%B} {first.day} – {last:%B} {last.day}, {last.year}"
        return f"{first:%b} {first.day}, {first.year} – {last:%b} {last.day}, {last.year}"
    return f"{anchor:%B %Y}"
