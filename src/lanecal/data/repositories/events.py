from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, List, Optional

from postgrest.exceptions import APIError

from ...domain import CalendarEvent, EventConflictError, StorageError
from ..supabase import SupabaseGateway

logger = logging.getLogger(__name__)

# Postgres exclusion_violation, raised by the events table's no-overlap constraint.
EXCLUSION_VIOLATION = "23P01"


@dataclass(slots=True)
class SupabaseEventRepository:
    gateway: SupabaseGateway
    table_name: str

    def _execute(self, query: Any) -> List[dict]:
        try:
            response = query.execute()
        except APIError as exc:
            if getattr(exc, "code", None) == EXCLUSION_VIOLATION:
                raise EventConflictError() from exc
            raise StorageError(f"Supabase request on '{self.table_name}' failed") from exc
        return list(response.data or [])

    def _table(self):
        return self.gateway.table(self.table_name)

    def list_range(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        query = (
            self._table()
            .select("*")
            .lt("starts_at", end.isoformat())
            .gt("ends_at", start.isoformat())
            .order("starts_at", desc=False)
        )
        return [CalendarEvent.from_record(record) for record in self._execute(query)]

    def find_overlapping(
        self, start: datetime, end: datetime, *, exclude_id: Optional[str] = None
    ) -> List[CalendarEvent]:
        query = (
            self._table()
            .select("*")
            .lt("starts_at", end.isoformat())
            .gt("ends_at", start.isoformat())
        )
        if exclude_id is not None:
            query = query.neq("id", exclude_id)
        return [CalendarEvent.from_record(record) for record in self._execute(query)]

    def get(self, event_id: str) -> Optional[CalendarEvent]:
        records = self._execute(self._table().select("*").eq("id", event_id).limit(1))
        if not records:
            return None
        return CalendarEvent.from_record(records[0])

    def insert(self, event: CalendarEvent) -> CalendarEvent:
        payload = event.to_record()
        records = self._execute(self._table().insert(payload))
        return CalendarEvent.from_record(records[0] if records else payload)

    def replace(self, event: CalendarEvent) -> CalendarEvent:
        payload = event.to_record()
        payload.pop("created_at", None)
        records = self._execute(self._table().update(payload).eq("id", event.id))
        if not records:
            return event
        return CalendarEvent.from_record(records[0])

    def delete(self, event_id: str) -> bool:
        deleted = self._execute(self._table().delete().eq("id", event_id))
        return bool(deleted)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        # PostgREST has no client-side transactions; the table's exclusion
        # constraint rejects a racing overlap and surfaces as EventConflictError.
        yield
