from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class FieldError:
    """A validation problem; ``field`` is ``None`` for form-level errors."""

    field: Optional[str]
    message: str


class CalendarError(Exception):
    """Base class for failures surfaced by the calendar write path."""

    kind = "error"


class EventValidationError(CalendarError):
    """Raised when a payload is malformed or breaks the ``end > start`` invariant."""

    kind = "validation"

    def __init__(self, errors: Iterable[FieldError], message: str = "Invalid event payload") -> None:
        super().__init__(message)
        self.errors: Tuple[FieldError, ...] = tuple(errors)

    def field_errors(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for error in self.errors:
            if error.field is not None:
                grouped.setdefault(error.field, []).append(error.message)
        return grouped

    def form_errors(self) -> List[str]:
        return [error.message for error in self.errors if error.field is None]


class EventConflictError(CalendarError):
    """Raised when a timed event would overlap an existing event."""

    kind = "conflict"

    def __init__(self, conflicting_ids: Sequence[str] = (), message: str = "Event conflicts with an existing entry") -> None:
        super().__init__(message)
        self.conflicting_ids: Tuple[str, ...] = tuple(conflicting_ids)


class EventNotFoundError(CalendarError):
    kind = "not_found"

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event '{event_id}' not found.")
        self.event_id = event_id


class StorageError(CalendarError):
    """Raised for unexpected persistence failures."""

    kind = "storage"
