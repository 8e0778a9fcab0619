from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.grid import MonthCell
from ..domain import CalendarEvent, PositionedSegment
from ..services import DayLayout, RenderedView


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    color: str
    all_day: bool = Field(alias="allDay")
    start: str
    end: str
    time_zone: str = Field(alias="timeZone")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_domain(cls, event: CalendarEvent) -> "EventPayload":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            location=event.location,
            color=event.color,
            all_day=event.all_day,
            start=event.start.isoformat(),
            end=event.end.isoformat(),
            time_zone=event.time_zone,
            created_at=_iso(event.created_at),
            updated_at=_iso(event.updated_at),
        )


class SegmentPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_id: str = Field(alias="eventId")
    title: str
    color: str
    start: str
    end: str
    start_minutes: int = Field(alias="startMinutes")
    end_minutes: int = Field(alias="endMinutes")
    height_minutes: int = Field(alias="heightMinutes")
    lane: int
    lane_count: int = Field(alias="laneCount")

    @classmethod
    def from_domain(cls, positioned: PositionedSegment) -> "SegmentPayload":
        segment = positioned.segment
        return cls(
            event_id=segment.event.id,
            title=segment.event.title,
            color=segment.event.color,
            start=segment.start.isoformat(),
            end=segment.end.isoformat(),
            start_minutes=segment.start_minutes,
            end_minutes=segment.end_minutes,
            height_minutes=segment.height_minutes,
            lane=positioned.lane,
            lane_count=positioned.lane_count,
        )


class DayPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: str
    banners: List[EventPayload] = Field(default_factory=list)
    segments: List[SegmentPayload] = Field(default_factory=list)
    lane_count: int = Field(default=0, alias="laneCount")

    @classmethod
    def from_domain(cls, layout: DayLayout) -> "DayPayload":
        return cls(
            day=layout.day.date().isoformat(),
            banners=[EventPayload.from_domain(event) for event in layout.banners],
            segments=[SegmentPayload.from_domain(segment) for segment in layout.segments],
            lane_count=layout.lane_count,
        )


class MonthCellPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: str
    in_month: bool = Field(alias="inMonth")
    is_today: bool = Field(alias="isToday")
    events: List[EventPayload] = Field(default_factory=list)
    hidden_count: int = Field(default=0, alias="hiddenCount")

    @classmethod
    def from_domain(cls, cell: MonthCell) -> "MonthCellPayload":
        return cls(
            day=cell.day.date().isoformat(),
            in_month=cell.in_month,
            is_today=cell.is_today,
            events=[EventPayload.from_domain(event) for event in cell.events],
            hidden_count=cell.hidden_count,
        )


class ViewPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    view: str
    label: str
    start: str
    end: str
    days: List[DayPayload] = Field(default_factory=list)
    weeks: List[List[MonthCellPayload]] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, rendered: RenderedView) -> "ViewPayload":
        return cls(
            view=rendered.view.value,
            label=rendered.label,
            start=rendered.window.start.isoformat(),
            end=rendered.window.end.isoformat(),
            days=[DayPayload.from_domain(day) for day in rendered.days],
            weeks=[[MonthCellPayload.from_domain(cell) for cell in week] for week in rendered.weeks],
        )


class ErrorDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: str
    message: str
    field_errors: Dict[str, List[str]] = Field(default_factory=dict, alias="fieldErrors")
    form_errors: List[str] = Field(default_factory=list, alias="formErrors")
    conflicts: List[str] = Field(default_factory=list)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
