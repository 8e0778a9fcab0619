from __future__ import annotations

from typing import Any, Dict

from ..domain import CalendarError, CalendarEvent, EventConflictError, EventValidationError
from ..services import RenderedView
from .models import ErrorDetail, EventPayload, ViewPayload


def serialize_event(event: CalendarEvent) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(by_alias=True)


def serialize_view(rendered: RenderedView) -> Dict[str, Any]:
    return ViewPayload.from_domain(rendered).model_dump(by_alias=True)


def serialize_error(error: CalendarError, *, message: str | None = None) -> Dict[str, Any]:
    detail = ErrorDetail(kind=error.kind, message=message or str(error))
    if isinstance(error, EventValidationError):
        detail.field_errors = error.field_errors()
        detail.form_errors = error.form_errors()
    elif isinstance(error, EventConflictError):
        detail.form_errors = [str(error)]
        detail.conflicts = list(error.conflicting_ids)
    return {"error": detail.model_dump(by_alias=True)}
