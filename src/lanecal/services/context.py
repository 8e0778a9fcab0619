from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from ..config import AppSettings, get_settings
from ..data import EventRepository, JsonEventRepository, SupabaseEventRepository, SupabaseGateway


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_repository(settings: AppSettings) -> EventRepository:
    if settings.storage.backend == "supabase":
        gateway = SupabaseGateway(settings.supabase)
        return SupabaseEventRepository(gateway=gateway, table_name=settings.storage.events_table)
    if settings.storage.backend != "local":
        raise ValueError(f"Unknown storage backend '{settings.storage.backend}'")
    return JsonEventRepository(settings.storage.local_path)


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, the event store and the clock."""

    settings: AppSettings = field(default_factory=get_settings)
    events: Optional[EventRepository] = None
    clock: Callable[[], datetime] = _utc_now

    def __post_init__(self) -> None:
        if self.events is None:
            self.events = build_repository(self.settings)

    @property
    def default_tz(self) -> tzinfo:
        return ZoneInfo(self.settings.calendar.default_timezone)

    def now(self) -> datetime:
        return self.clock()
