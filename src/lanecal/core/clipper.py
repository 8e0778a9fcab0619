from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Iterable, List, Optional

from ..domain.models import CalendarEvent, Segment
from .config import MINUTES_PER_DAY
from .ranges import end_of_day, start_of_day

MIN_VISUAL_MINUTES = 30


def _local(instant: datetime, zone: Optional[tzinfo]) -> datetime:
    return instant.astimezone(zone) if zone is not None else instant


def _floor_minutes(instant: datetime) -> int:
    return instant.hour * 60 + instant.minute


def _ceil_minutes(instant: datetime) -> int:
    minutes = instant.hour * 60 + instant.minute
    if instant.second or instant.microsecond:
        minutes += 1
    return minutes


def clip(event: CalendarEvent, day: datetime, *, min_visual_minutes: int = MIN_VISUAL_MINUTES) -> Optional[Segment]:
    """Portion of ``event`` inside ``day``, or ``None`` when they do not intersect."""

    day_start = start_of_day(day)
    day_end = end_of_day(day)
    if event.end <= day_start or event.start >= day_end:
        return None

    start = max(event.start, day_start)
    end = min(event.end, day_end)
    zone = day_start.tzinfo
    start_minutes = _floor_minutes(_local(start, zone))
    end_minutes = MINUTES_PER_DAY if end >= day_end else _ceil_minutes(_local(end, zone))
    return Segment(
        event=event,
        start_minutes=start_minutes,
        end_minutes=end_minutes,
        start=start,
        end=end,
        min_visual_minutes=min_visual_minutes,
    )


def is_banner(event: CalendarEvent, zone: Optional[tzinfo] = None) -> bool:
    """All-day events and timed events spanning several dates render as banners."""

    if event.all_day:
        return True
    zone = zone if zone is not None else event.start.tzinfo
    return _local(event.start, zone).date() != _local(event.end, zone).date()


@dataclass(frozen=True, slots=True)
class DaySplit:
    banners: List[CalendarEvent] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)


def split_day(
    events: Iterable[CalendarEvent],
    day: datetime,
    *,
    min_visual_minutes: int = MIN_VISUAL_MINUTES,
) -> DaySplit:
    day_start = start_of_day(day)
    day_end = end_of_day(day)
    split = DaySplit()
    for event in events:
        if is_banner(event, day_start.tzinfo):
            if event.end > day_start and event.start < day_end:
                split.banners.append(event)
            continue
        segment = clip(event, day_start, min_visual_minutes=min_visual_minutes)
        if segment is not None:
            split.segments.append(segment)
    return split
