from __future__ import annotations

from datetime import datetime
from typing import ContextManager, List, Optional, Protocol

from ...domain import CalendarEvent


class EventRepository(Protocol):
    """Persistence collaborator for calendar events.

    ``transaction()`` must make an overlap query followed by a write atomic
    with respect to other writers, either by serialising them or by a storage
    constraint that rejects the overlapping write.
    """

    def list_range(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        ...

    def find_overlapping(
        self, start: datetime, end: datetime, *, exclude_id: Optional[str] = None
    ) -> List[CalendarEvent]:
        ...

    def get(self, event_id: str) -> Optional[CalendarEvent]:
        ...

    def insert(self, event: CalendarEvent) -> CalendarEvent:
        ...

    def replace(self, event: CalendarEvent) -> CalendarEvent:
        ...

    def delete(self, event_id: str) -> bool:
        ...

    def transaction(self) -> ContextManager[None]:
        ...
