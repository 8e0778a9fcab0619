# File: tests/unit/test_grid.py
"""
Unit tests for the month grid.
"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import at, make_event
from lanecal.core.grid import build_grid, events_for_day, month_cells
from lanecal.core.ranges import MONDAY, SUNDAY


class TestBuildGrid:
    """Tests for grid shape."""

    @pytest.mark.parametrize(
        "anchor, week_start, rows",
        [
            (at(10, month=2, year=2015), SUNDAY, 4),  # February 2015 starts on a Sunday
            (at(10), MONDAY, 5),
            (at(10), SUNDAY, 6),
        ],
    )
    def test_row_count(self, anchor, week_start, rows):
        grid = build_grid(anchor, week_start=week_start)
        assert len(grid) == rows
        assert all(len(week) == 7 for week in grid)

    def test_first_cell_is_week_start(self):
        grid = build_grid(at(10), week_start=MONDAY)
        assert grid[0][0] == at(27, month=5)
        assert grid[0][0].weekday() == MONDAY

    def test_days_are_consecutive(self):
        cells = [day for week in build_grid(at(10)) for day in week]
        assert all((later - earlier).days == 1 for earlier, later in zip(cells, cells[1:]))


class TestMonthCells:
    """Tests for per-day event lists."""

    def test_hidden_count(self):
        events = [make_event(str(hour), at(4, hour), at(4, hour + 1)) for hour in range(8, 13)]
        cells = [cell for week in month_cells(at(10), events, limit=3) for cell in week]
        june_4 = next(cell for cell in cells if cell.day == at(4))
        assert [event.id for event in june_4.events] == ["8", "9", "10"]
        assert june_4.hidden_count == 2

    def test_in_month_and_today_flags(self):
        cells = [cell for week in month_cells(at(10), [], now=at(12, 15)) for cell in week]
        assert not cells[0].in_month
        assert [cell.day for cell in cells if cell.is_today] == [at(12)]

    def test_today_uses_the_grid_zone(self):
        sydney = timezone(timedelta(hours=10))
        anchor = datetime(2024, 6, 10, tzinfo=sydney)
        # 20:00 UTC on the 11th is already the 12th at UTC+10
        cells = [cell for week in month_cells(anchor, [], now=at(11, 20)) for cell in week]
        assert [cell.day for cell in cells if cell.is_today] == [datetime(2024, 6, 12, tzinfo=sydney)]

    def test_multi_day_event_appears_on_each_day(self):
        trip = make_event("trip", at(3, 18), at(5, 9))
        days = [cell.day for week in month_cells(at(10), [trip]) for cell in week if cell.events]
        assert days == [at(3), at(4), at(5)]

    def test_events_for_day_excludes_touching(self):
        late = make_event("late", at(3, 23), at(4))
        assert events_for_day([late], at(4)) == []
        assert events_for_day([late], at(3)) == [late]
