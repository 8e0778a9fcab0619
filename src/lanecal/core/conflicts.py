"""Overlap rule enforced on every create and update.

A timed candidate may not overlap any other event, timed or all-day. All-day
candidates are banners and are never blocked, whatever they cover.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, Protocol, Sequence, Tuple, Union

from ..domain.enums import RejectKind
from ..domain.models import CalendarEvent
from .ranges import end_of_day, overlaps

logger = logging.getLogger(__name__)

ONE_MINUTE = timedelta(minutes=1)


class OverlapSource(Protocol):
    def find_overlapping(
        self, start: datetime, end: datetime, *, exclude_id: Optional[str] = None
    ) -> Sequence[CalendarEvent]:
        ...


@dataclass(frozen=True, slots=True)
class EventCollection:
    """Adapts an in-memory iterable of events to :class:`OverlapSource`."""

    events: Tuple[CalendarEvent, ...]

    @classmethod
    def of(cls, events: Iterable[CalendarEvent]) -> "EventCollection":
        return cls(tuple(events))

    def find_overlapping(
        self, start: datetime, end: datetime, *, exclude_id: Optional[str] = None
    ) -> Sequence[CalendarEvent]:
        return [
            event
            for event in self.events
            if event.id != exclude_id and overlaps(event.start, event.end, start, end)
        ]


@dataclass(frozen=True, slots=True)
class Candidate:
    start: datetime
    end: datetime
    all_day: bool = False
    exclude_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Accept:
    accepted = True


@dataclass(frozen=True, slots=True)
class Reject:
    kind: RejectKind
    reason: str
    field: Optional[str] = None
    conflicting_ids: Tuple[str, ...] = ()

    accepted = False


Decision = Union[Accept, Reject]


def check(candidate: Candidate, existing: Union[OverlapSource, Iterable[CalendarEvent]]) -> Decision:
    if candidate.end <= candidate.start:
        return Reject(
            kind=RejectKind.INVALID_RANGE,
            reason="End time must be after start time",
            field="end",
        )
    if candidate.all_day:
        return Accept()

    source = existing if hasattr(existing, "find_overlapping") else EventCollection.of(existing)
    overlapping = source.find_overlapping(candidate.start, candidate.end, exclude_id=candidate.exclude_id)
    # Sources may over-select; the strict predicate decides.
    conflicting = tuple(
        event.id
        for event in overlapping
        if event.id != candidate.exclude_id and overlaps(event.start, event.end, candidate.start, candidate.end)
    )
    if conflicting:
        logger.debug("Candidate %s-%s conflicts with %s", candidate.start, candidate.end, conflicting)
        return Reject(
            kind=RejectKind.CONFLICT,
            reason="Event conflicts with an existing entry",
            conflicting_ids=conflicting,
        )
    return Accept()


def normalize_all_day_end(end: datetime) -> datetime:
    """Pad an all-day end inside the last minute of its date (23:59 up to 23:59:59.999) to the next midnight."""

    boundary = end_of_day(end)
    if boundary - end <= ONE_MINUTE:
        return boundary
    return end
