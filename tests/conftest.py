# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable events, settings and a file-backed calendar service.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from lanecal.config import AppSettings, CalendarSettings, ServerSettings, StorageSettings, SupabaseSettings
from lanecal.core.ranges import SUNDAY
from lanecal.data import JsonEventRepository
from lanecal.domain import CalendarEvent
from lanecal.services import CalendarService, ServiceContext

UTC = timezone.utc
FIXED_NOW = datetime(2024, 6, 1, 8, 0, tzinfo=UTC)


def at(day: int, hour: int = 0, minute: int = 0, month: int = 6, year: int = 2024) -> datetime:
    """Aware UTC instant; most tests live in June 2024."""
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


def make_event(
    event_id: str,
    start: datetime,
    end: datetime,
    *,
    all_day: bool = False,
    title: str = None,
) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        title=title or f"Event {event_id}",
        start=start,
        end=end,
        color="#039be5",
        all_day=all_day,
    )


# ==================== Settings Fixtures ====================

@pytest.fixture
def calendar_settings():
    """Calendar defaults used by the render tests."""
    return CalendarSettings(
        week_start=SUNDAY,
        default_color="#039be5",
        default_timezone="UTC",
        min_visual_minutes=30,
        month_cell_limit=3,
    )


@pytest.fixture
def app_settings(tmp_path: Path, calendar_settings):
    """Application settings pointing the local store at a temp file."""
    return AppSettings(
        calendar=calendar_settings,
        supabase=SupabaseSettings(url=None, anon_key=None),
        storage=StorageSettings(
            backend="local",
            events_table="calendar_events",
            local_path=tmp_path / "events.json",
        ),
        server=ServerSettings(host="127.0.0.1", port=8000),
    )


# ==================== Service Fixtures ====================

@pytest.fixture
def repository(app_settings):
    """Empty JSON event store."""
    return JsonEventRepository(app_settings.storage.local_path)


@pytest.fixture
def context(app_settings, repository):
    """Service context with a frozen clock."""
    return ServiceContext(settings=app_settings, events=repository, clock=lambda: FIXED_NOW)


@pytest.fixture
def service(context):
    """Calendar service over the temp store."""
    return CalendarService(context)


@pytest.fixture
def timed_payload():
    """Valid payload for a one-hour meeting."""
    return {
        "title": "Standup",
        "start": "2024-06-01T10:00:00Z",
        "end": "2024-06-01T11:00:00Z",
    }


@pytest.fixture
def day_events():
    """Three timed events on June 3rd: two overlapping, the third touching the first."""
    return [
        make_event("a", at(3, 9), at(3, 10)),
        make_event("b", at(3, 9, 30), at(3, 10, 30)),
        make_event("c", at(3, 10), at(3, 11)),
    ]


class FailingRepository(JsonEventRepository):
    """JSON store whose queries blow up with a driver-style error."""

    def list_range(self, start, end):
        raise RuntimeError("secret dsn=postgres://admin:hunter2@db")

    def find_overlapping(self, start, end, *, exclude_id=None):
        raise RuntimeError("secret dsn=postgres://admin:hunter2@db")


@pytest.fixture
def failing_service(app_settings):
    """Calendar service whose store fails with a non-calendar error."""
    repository = FailingRepository(app_settings.storage.local_path)
    return CalendarService(ServiceContext(settings=app_settings, events=repository, clock=lambda: FIXED_NOW))
