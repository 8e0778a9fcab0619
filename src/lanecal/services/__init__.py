"""Application services orchestrating data access and the layout engine."""

from __future__ import annotations

from .calendar import CalendarService
from .context import ServiceContext, build_repository
from .render import DayLayout, RenderedView, layout_day, render_view

__all__ = [
    "CalendarService",
    "DayLayout",
    "RenderedView",
    "ServiceContext",
    "build_repository",
    "layout_day",
    "render_view",
]
