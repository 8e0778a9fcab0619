from __future__ import annotations

from enum import Enum


class CalendarView(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class RejectKind(str, Enum):
    INVALID_RANGE = "invalid_range"
    CONFLICT = "conflict"
