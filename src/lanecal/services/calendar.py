from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, List, Mapping
from uuid import uuid4

from ..core.conflicts import Candidate, Reject, check, normalize_all_day_end
from ..core.ranges import TimeRange
from ..domain import (
    CalendarError,
    CalendarEvent,
    EventConflictError,
    EventNotFoundError,
    EventValidationError,
    FieldError,
    RejectKind,
    StorageError,
)
from ..data import EventRepository
from .context import ServiceContext
from .validation import ParseFailure, parse_event_input, parse_event_patch

logger = logging.getLogger(__name__)


def _raise_rejection(decision: Reject) -> None:
    if decision.kind is RejectKind.INVALID_RANGE:
        raise EventValidationError([FieldError(field=decision.field, message=decision.reason)])
    raise EventConflictError(decision.conflicting_ids, decision.reason)


@dataclass(slots=True)
class CalendarService:
    """Read and write path for calendar events.

    Writes run validation, then the conflict guard and the store write inside
    one repository transaction. Unexpected storage failures are logged and
    re-raised as :class:`StorageError`.
    """

    context: ServiceContext

    @property
    def events(self) -> EventRepository:
        if self.context.events is None:
            raise StorageError("No event repository configured")
        return self.context.events

    def list_events(self, window: TimeRange) -> List[CalendarEvent]:
        try:
            return self.events.list_range(window.start, window.end)
        except StorageError:
            logger.exception("Failed to load events for %s - %s", window.start, window.end)
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to load events for %s - %s", window.start, window.end)
            raise StorageError("Unable to load events") from exc

    def get_event(self, event_id: str) -> CalendarEvent:
        event = self.events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def create_event(self, payload: Mapping[str, Any]) -> CalendarEvent:
        result = parse_event_input(payload, default_tz=self.context.default_tz)
        if isinstance(result, ParseFailure):
            raise EventValidationError(result.errors)
        draft = result.value
        calendar_settings = self.context.settings.calendar

        end = normalize_all_day_end(draft.end) if draft.all_day else draft.end
        now = self.context.now()
        event = CalendarEvent(
            id=str(uuid4()),
            title=draft.title,
            start=draft.start,
            end=end,
            color=draft.color or calendar_settings.default_color,
            all_day=draft.all_day,
            time_zone=draft.time_zone or calendar_settings.default_timezone,
            description=draft.description,
            location=draft.location,
            created_at=now,
            updated_at=now,
        )

        def _write() -> CalendarEvent:
            decision = check(Candidate(event.start, event.end, event.all_day), self.events)
            if isinstance(decision, Reject):
                _raise_rejection(decision)
            return self.events.insert(event)

        saved = self._guarded(_write, action="create")
        logger.info("Created event %s (%s - %s)", saved.id, saved.start.isoformat(), saved.end.isoformat())
        return saved

    def update_event(self, event_id: str, payload: Mapping[str, Any]) -> CalendarEvent:
        result = parse_event_patch(payload, default_tz=self.context.default_tz)
        if isinstance(result, ParseFailure):
            raise EventValidationError(result.errors)
        patch = result.value

        def _write() -> CalendarEvent:
            existing = self.events.get(event_id)
            if existing is None:
                raise EventNotFoundError(event_id)
            merged = replace(existing, **patch.changes, updated_at=self.context.now())
            if merged.all_day and ("end" in patch or "all_day" in patch):
                merged = replace(merged, end=normalize_all_day_end(merged.end))
            decision = check(
                Candidate(merged.start, merged.end, merged.all_day, exclude_id=event_id),
                self.events,
            )
            if isinstance(decision, Reject):
                _raise_rejection(decision)
            return self.events.replace(merged)

        saved = self._guarded(_write, action="update")
        logger.info("Updated event %s", saved.id)
        return saved

    def delete_event(self, event_id: str) -> None:
        def _delete() -> bool:
            return self.events.delete(event_id)

        if not self._guarded(_delete, action="delete"):
            raise EventNotFoundError(event_id)
        logger.info("Deleted event %s", event_id)

    def _guarded(self, operation, *, action: str):
        try:
            with self.events.transaction():
                return operation()
        except StorageError:
            logger.exception("Event %s failed in storage", action)
            raise
        except CalendarError as exc:
            logger.info("Event %s rejected: %s", action, exc)
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Event %s failed", action)
            raise StorageError(f"Unable to {action} event") from exc
