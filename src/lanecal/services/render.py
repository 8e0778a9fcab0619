from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ..config import CalendarSettings
from ..core.clipper import split_day
from ..core.grid import MonthCell, month_cells
from ..core.lanes import layout
from ..core.window import ViewRange, view_label, week_days, window_for
from ..domain import CalendarEvent, CalendarView, PositionedSegment


@dataclass(frozen=True, slots=True)
class DayLayout:
    day: datetime
    banners: List[CalendarEvent] = field(default_factory=list)
    segments: List[PositionedSegment] = field(default_factory=list)

    @property
    def lane_count(self) -> int:
        return self.segments[0].lane_count if self.segments else 0


@dataclass(frozen=True, slots=True)
class RenderedView:
    view: CalendarView
    window: ViewRange
    label: str
    days: List[DayLayout] = field(default_factory=list)
    weeks: List[List[MonthCell]] = field(default_factory=list)


def layout_day(events: Iterable[CalendarEvent], day: datetime, *, min_visual_minutes: int = 30) -> DayLayout:
    split = split_day(events, day, min_visual_minutes=min_visual_minutes)
    return DayLayout(day=day, banners=split.banners, segments=layout(split.segments))


def render_view(
    anchor: datetime,
    view: CalendarView,
    events: Iterable[CalendarEvent],
    settings: CalendarSettings,
    *,
    now: Optional[datetime] = None,
) -> RenderedView:
    """Lay out ``events`` for the window of ``view`` anchored at ``anchor``."""

    view = CalendarView(view)
    pool = list(events)
    window = window_for(anchor, view, week_start=settings.week_start)
    label = view_label(anchor, view, week_start=settings.week_start)

    if view is CalendarView.MONTH:
        weeks = month_cells(
            anchor,
            pool,
            week_start=settings.week_start,
            limit=settings.month_cell_limit,
            now=now,
        )
        return RenderedView(view=view, window=window, label=label, weeks=weeks)

    days = [window.start] if view is CalendarView.DAY else week_days(anchor, week_start=settings.week_start)
    layouts = [layout_day(pool, day, min_visual_minutes=settings.min_visual_minutes) for day in days]
    return RenderedView(view=view, window=window, label=label, days=layouts)
