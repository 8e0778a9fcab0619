from __future__ import annotations

import calendar
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core.config import EVENTS_FILE

load_dotenv()

_WEEKDAYS = {name.lower(): index for index, name in enumerate(calendar.day_name)}


@dataclass(frozen=True)
class CalendarSettings:
    week_start: int
    default_color: str
    default_timezone: str
    min_visual_minutes: int
    month_cell_limit: int


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    events_table: str
    local_path: Path


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True)
class AppSettings:
    calendar: CalendarSettings
    supabase: SupabaseSettings
    storage: StorageSettings
    server: ServerSettings


def _weekday_from_env(name: str, default: str) -> int:
    raw = (os.getenv(name) or default).strip().lower()
    return _WEEKDAYS.get(raw, _WEEKDAYS[default.lower()])


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    calendar_settings = CalendarSettings(
        week_start=_weekday_from_env("LANECAL_WEEK_START", "Sunday"),
        default_color=os.getenv("LANECAL_DEFAULT_COLOR", "#039be5"),
        default_timezone=os.getenv("LANECAL_TIMEZONE", "UTC"),
        min_visual_minutes=_int_from_env("LANECAL_MIN_VISUAL_MINUTES", 30),
        month_cell_limit=_int_from_env("LANECAL_MONTH_CELL_LIMIT", 3),
    )

    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    storage = StorageSettings(
        backend=os.getenv("LANECAL_STORAGE_BACKEND", "local").lower(),
        events_table=os.getenv("SUPABASE_EVENTS_TABLE", "calendar_events"),
        local_path=Path(os.getenv("LANECAL_EVENTS_FILE") or EVENTS_FILE),
    )

    server = ServerSettings(
        host=os.getenv("LANECAL_HOST", "127.0.0.1"),
        port=_int_from_env("LANECAL_PORT", 8000),
    )

    return AppSettings(calendar=calendar_settings, supabase=supabase, storage=storage, server=server)
