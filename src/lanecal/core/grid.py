from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..domain.enums import CalendarView
from ..domain.models import CalendarEvent
from .ranges import SUNDAY, add_days, end_of_day, overlaps, start_of_day
from .window import window_for

Week = List[datetime]


def build_grid(anchor: datetime, *, week_start: int = SUNDAY) -> List[Week]:
    """Rows of seven day instants covering the month view around ``anchor``."""

    window = window_for(anchor, CalendarView.MONTH, week_start=week_start)
    weeks: List[Week] = []
    current = window.start
    while current < window.end:
        week: Week = []
        for _ in range(7):
            week.append(current)
            current = add_days(current, 1)
        weeks.append(week)
    return weeks


@dataclass(frozen=True, slots=True)
class MonthCell:
    day: datetime
    in_month: bool
    is_today: bool
    events: Tuple[CalendarEvent, ...] = field(default=())
    hidden_count: int = 0


def events_for_day(events: Iterable[CalendarEvent], day: datetime) -> List[CalendarEvent]:
    day_start = start_of_day(day)
    day_end = end_of_day(day)
    matched = [event for event in events if overlaps(event.start, event.end, day_start, day_end)]
    return sorted(matched, key=lambda event: event.start)


def month_cells(
    anchor: datetime,
    events: Iterable[CalendarEvent],
    *,
    week_start: int = SUNDAY,
    limit: int = 3,
    now: Optional[datetime] = None,
) -> List[List[MonthCell]]:
    """Grid cells with at most ``limit`` events each and the count of the rest."""

    pool = list(events)
    today = None
    if now is not None:
        # Compare calendar dates on the grid's own wall clock.
        today = (now.astimezone(anchor.tzinfo) if anchor.tzinfo else now).date()
    rows: List[List[MonthCell]] = []
    for week in build_grid(anchor, week_start=week_start):
        row: List[MonthCell] = []
        for day in week:
            matched = events_for_day(pool, day)
            row.append(
                MonthCell(
                    day=day,
                    in_month=day.month == anchor.month,
                    is_today=day.date() == today,
                    events=tuple(matched[:limit]),
                    hidden_count=max(len(matched) - limit, 0),
                )
            )
        rows.append(row)
    return rows
