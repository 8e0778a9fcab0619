"""Domain models for calendar layout and scheduling."""

from __future__ import annotations

from .enums import CalendarView, RejectKind
from .errors import (
    CalendarError,
    EventConflictError,
    EventNotFoundError,
    EventValidationError,
    FieldError,
    StorageError,
)
from .models import CalendarEvent, PositionedSegment, Segment

__all__ = [
    "CalendarError",
    "CalendarEvent",
    "CalendarView",
    "EventConflictError",
    "EventNotFoundError",
    "EventValidationError",
    "FieldError",
    "PositionedSegment",
    "RejectKind",
    "Segment",
    "StorageError",
]
