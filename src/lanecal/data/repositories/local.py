from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from copy import deepcopy
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import orjson

from ...core.ranges import overlaps
from ...domain import CalendarEvent, StorageError

logger = logging.getLogger(__name__)

DEFAULT_STATE: Dict[str, Any] = {
    "events": [],
    "metadata": {"schema_version": 1},
}


class JsonEventRepository:
    """Event store persisted as a single orjson document.

    Every read-then-write sequence runs under one re-entrant lock and the file
    is written once when the outermost :meth:`transaction` exits cleanly. A
    failed transaction drops the in-memory state so the next access reloads it
    from disk.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._state: Optional[Dict[str, Any]] = None
        self._lock = threading.RLock()
        self._depth = 0
        self._dirty = False

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_materialized(self) -> Dict[str, Any]:
        if self._state is not None:
            return self._state
        try:
            raw = self._path.read_bytes() if self._path.exists() else b""
            state = orjson.loads(raw) if raw else deepcopy(DEFAULT_STATE)
        except (OSError, orjson.JSONDecodeError) as exc:
            raise StorageError(f"Unable to read event store at {self._path}") from exc
        # Backfill missing keys when upgrading.
        for key, value in DEFAULT_STATE.items():
            state.setdefault(key, deepcopy(value))
        self._state = state
        return state

    def _persist(self) -> None:
        if self._state is None or not self._dirty:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = orjson.dumps(self._state, option=orjson.OPT_INDENT_2)
            self._path.write_bytes(payload + b"\n")
        except OSError as exc:
            raise StorageError(f"Unable to write event store at {self._path}") from exc
        self._dirty = False
        logger.debug("Persisted %d events to %s", len(self._state["events"]), self._path)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            self._depth += 1
            try:
                yield
                if self._depth == 1:
                    self._persist()
            except BaseException:
                if self._depth == 1:
                    self._state = None
                    self._dirty = False
                raise
            finally:
                self._depth -= 1

    def _records(self) -> List[Dict[str, Any]]:
        return self._ensure_materialized()["events"]

    def _events(self) -> List[CalendarEvent]:
        return [CalendarEvent.from_record(record) for record in self._records()]

    def _index_of(self, event_id: str) -> Optional[int]:
        for index, record in enumerate(self._records()):
            if record["id"] == event_id:
                return index
        return None

    def list_range(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        with self._lock:
            matched = [event for event in self._events() if overlaps(event.start, event.end, start, end)]
        return sorted(matched, key=lambda event: event.start)

    def find_overlapping(
        self, start: datetime, end: datetime, *, exclude_id: Optional[str] = None
    ) -> List[CalendarEvent]:
        with self._lock:
            return [
                event
                for event in self._events()
                if event.id != exclude_id and overlaps(event.start, event.end, start, end)
            ]

    def get(self, event_id: str) -> Optional[CalendarEvent]:
        with self._lock:
            index = self._index_of(event_id)
            if index is None:
                return None
            return CalendarEvent.from_record(self._records()[index])

    def insert(self, event: CalendarEvent) -> CalendarEvent:
        with self.transaction():
            if self._index_of(event.id) is not None:
                raise StorageError(f"Event '{event.id}' already exists")
            self._records().append(event.to_record())
            self._dirty = True
        return event

    def replace(self, event: CalendarEvent) -> CalendarEvent:
        with self.transaction():
            index = self._index_of(event.id)
            if index is None:
                raise StorageError(f"Event '{event.id}' vanished before it could be replaced")
            self._records()[index] = event.to_record()
            self._dirty = True
        return event

    def delete(self, event_id: str) -> bool:
        with self.transaction():
            index = self._index_of(event_id)
            if index is None:
                return False
            del self._records()[index]
            self._dirty = True
        return True
