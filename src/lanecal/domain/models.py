from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..core.ranges import TimeRange


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        # Stored timestamps are always UTC when the offset was dropped upstream.
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    id: str
    title: str
    start: datetime
    end: datetime
    color: str
    all_day: bool = False
    time_zone: str = "UTC"
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def interval(self) -> TimeRange:
        return TimeRange(self.start, self.end)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CalendarEvent":
        return cls(
            id=str(record["id"]),
            title=str(record["title"]),
            start=_parse_datetime(record["starts_at"]),
            end=_parse_datetime(record["ends_at"]),
            color=str(record["color"]),
            all_day=bool(record.get("all_day", False)),
            time_zone=record.get("time_zone") or "UTC",
            description=record.get("description"),
            location=record.get("location"),
            created_at=_parse_datetime(record["created_at"]) if record.get("created_at") else None,
            updated_at=_parse_datetime(record["updated_at"]) if record.get("updated_at") else None,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "color": self.color,
            "all_day": self.all_day,
            "starts_at": self.start.isoformat(),
            "ends_at": self.end.isoformat(),
            "time_zone": self.time_zone,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(frozen=True, slots=True)
class Segment:
    """The part of an event visible on one rendered day."""

    event: CalendarEvent = field(compare=False)
    start_minutes: int
    end_minutes: int
    start: datetime
    end: datetime
    min_visual_minutes: int = 30

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def height_minutes(self) -> int:
        """Rendered height; short events are drawn at least ``min_visual_minutes`` tall."""

        return max(self.duration_minutes, self.min_visual_minutes)

    def overlaps(self, other: "Segment") -> bool:
        return self.start_minutes < other.end_minutes and self.end_minutes > other.start_minutes


@dataclass(frozen=True, slots=True)
class PositionedSegment:
    segment: Segment
    lane: int
    lane_count: int

    @property
    def event(self) -> CalendarEvent:
        return self.segment.event

    @property
    def start_minutes(self) -> int:
        return self.segment.start_minutes

    @property
    def end_minutes(self) -> int:
        return self.segment.end_minutes

    @property
    def height_minutes(self) -> int:
        return self.segment.height_minutes
