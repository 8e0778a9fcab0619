"""Explicit UI state: the active view/anchor and the event dialog state machine.

Both objects are immutable; every transition returns a new instance so the
caller decides where the current state lives.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ..core.ranges import SUNDAY, start_of_day
from ..core.window import ViewRange, step, today, window_for
from ..domain import CalendarError, CalendarEvent, CalendarView, EventValidationError
from ..services import CalendarService

DEFAULT_DURATION = timedelta(hours=1)
DRILL_DOWN_START = timedelta(hours=10)


class InvalidTransitionError(RuntimeError):
    """Raised when a dialog transition is not allowed from the current state."""


@dataclass(frozen=True)
class CalendarUiState:
    anchor: datetime
    view: CalendarView = CalendarView.MONTH
    week_start: int = SUNDAY

    @property
    def window(self) -> ViewRange:
        return window_for(self.anchor, self.view, week_start=self.week_start)

    def navigate(self, direction: int) -> "CalendarUiState":
        return replace(self, anchor=step(self.anchor, self.view, direction))

    def go_today(self, now: datetime) -> "CalendarUiState":
        return replace(self, anchor=today(now))

    def change_view(self, view: CalendarView) -> "CalendarUiState":
        return replace(self, view=CalendarView(view))

    def drill_down(self, day: datetime) -> "CalendarUiState":
        return replace(self, anchor=start_of_day(day), view=CalendarView.DAY)


class DialogState(str, Enum):
    IDLE = "idle"
    CREATING = "creating"
    EDITING = "editing"
    SUBMITTING = "submitting"
    ERROR = "error"


class DialogMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class EventDialog:
    state: DialogState = DialogState.IDLE
    mode: Optional[DialogMode] = None
    anchor: Optional[datetime] = None
    event: Optional[CalendarEvent] = None
    error: Optional[str] = None

    def _require(self, *allowed: DialogState) -> None:
        if self.state not in allowed:
            names = ", ".join(state.value for state in allowed)
            raise InvalidTransitionError(f"Cannot leave '{self.state.value}' here (expected one of: {names})")

    def open_create(self, anchor: datetime) -> "EventDialog":
        self._require(DialogState.IDLE)
        return EventDialog(state=DialogState.CREATING, mode=DialogMode.CREATE, anchor=anchor)

    def open_create_for_day(self, day: datetime) -> "EventDialog":
        return self.open_create(start_of_day(day) + DRILL_DOWN_START)

    def open_edit(self, event: CalendarEvent) -> "EventDialog":
        self._require(DialogState.IDLE)
        return EventDialog(state=DialogState.EDITING, mode=DialogMode.EDIT, anchor=event.start, event=event)

    def submit(self) -> "EventDialog":
        self._require(DialogState.CREATING, DialogState.EDITING, DialogState.ERROR)
        return replace(self, state=DialogState.SUBMITTING, error=None)

    def succeed(self) -> "EventDialog":
        self._require(DialogState.SUBMITTING)
        return EventDialog()

    def fail(self, message: str) -> "EventDialog":
        self._require(DialogState.SUBMITTING)
        return replace(self, state=DialogState.ERROR, error=message)

    def close(self) -> "EventDialog":
        self._require(DialogState.IDLE, DialogState.CREATING, DialogState.EDITING, DialogState.ERROR)
        return EventDialog()

    def default_draft(self) -> Dict[str, Any]:
        """Initial form values: the edited event, or a one-hour slot at the anchor."""

        if self.event is not None:
            return {
                "title": self.event.title,
                "description": self.event.description,
                "location": self.event.location,
                "color": self.event.color,
                "allDay": self.event.all_day,
                "start": self.event.start.isoformat(),
                "end": self.event.end.isoformat(),
                "timeZone": self.event.time_zone,
            }
        if self.anchor is None:
            return {}
        return {
            "title": "",
            "allDay": False,
            "start": self.anchor.isoformat(),
            "end": (self.anchor + DEFAULT_DURATION).isoformat(),
        }


def submit_dialog(
    dialog: EventDialog,
    service: CalendarService,
    payload: Mapping[str, Any],
) -> Tuple[EventDialog, Optional[CalendarEvent]]:
    """Drive ``dialog`` through submission against ``service``.

    Rejections land the dialog in ``ERROR`` with a readable message; the
    caller may retry with :meth:`EventDialog.submit` or close it.
    """

    submitting = dialog.submit()
    try:
        if submitting.mode is DialogMode.EDIT and submitting.event is not None:
            saved = service.update_event(submitting.event.id, payload)
        else:
            saved = service.create_event(payload)
    except EventValidationError as exc:
        messages = [f"{error.field}: {error.message}" if error.field else error.message for error in exc.errors]
        return submitting.fail("; ".join(messages) or str(exc)), None
    except CalendarError as exc:
        return submitting.fail(str(exc)), None
    return submitting.succeed(), saved
