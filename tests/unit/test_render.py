# File: tests/unit/test_render.py
"""
Unit tests for composing full view layouts.
"""

from conftest import at, make_event
from lanecal.domain import CalendarView
from lanecal.services import layout_day, render_view


class TestLayoutDay:
    """Tests for a single day column."""

    def test_banners_and_lanes(self, day_events):
        holiday = make_event("h", at(3), at(4), all_day=True)
        day = layout_day(day_events + [holiday], at(3))
        assert [event.id for event in day.banners] == ["h"]
        assert [(item.event.id, item.lane) for item in day.segments] == [("a", 0), ("b", 1), ("c", 0)]
        assert day.lane_count == 2

    def test_empty_day(self):
        assert layout_day([], at(3)).lane_count == 0


class TestRenderView:
    """Tests for whole views."""

    def test_day_view(self, day_events, calendar_settings):
        rendered = render_view(at(3, 12), CalendarView.DAY, day_events, calendar_settings)
        assert rendered.label == "Monday, June 3"
        assert [day.day for day in rendered.days] == [at(3)]
        assert rendered.weeks == []

    def test_week_view(self, day_events, calendar_settings):
        rendered = render_view(at(5), CalendarView.WEEK, day_events, calendar_settings)
        assert len(rendered.days) == 7
        assert [day.lane_count for day in rendered.days] == [0, 2, 0, 0, 0, 0, 0]

    def test_month_view(self, day_events, calendar_settings):
        rendered = render_view(at(5), CalendarView.MONTH, day_events, calendar_settings, now=at(3, 8))
        assert len(rendered.weeks) == 6
        june_3 = rendered.weeks[1][1]
        assert june_3.day == at(3)
        assert june_3.is_today
        assert len(june_3.events) == 3
        assert june_3.hidden_count == 0
