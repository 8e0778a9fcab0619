"""Parse-or-fail conversion of raw payloads into typed event drafts.

Callers receive a tagged :data:`ParseResult`; the pydantic models used to do
the work stay private to this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Annotated, Any, Dict, Generic, Mapping, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, ValidationInfo, field_validator

from ..domain import FieldError

T = TypeVar("T")

COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"
TITLE_MAX_LENGTH = 120

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
Color = Annotated[str, StringConstraints(pattern=COLOR_PATTERN)]

# Patch keys that may not be cleared with an explicit null.
_NON_NULLABLE = {"title", "color", "all_day", "start", "end", "time_zone"}

_PUBLIC_NAMES = {"all_day": "allDay", "time_zone": "timeZone"}


@dataclass(frozen=True, slots=True)
class EventInput:
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    color: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    time_zone: Optional[str] = None


@dataclass(frozen=True, slots=True)
class EventPatch:
    """Only the fields the caller actually supplied, keyed by attribute name."""

    changes: Dict[str, Any] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.changes

    def get(self, name: str, default: Any = None) -> Any:
        return self.changes.get(name, default)


@dataclass(frozen=True, slots=True)
class ParseSuccess(Generic[T]):
    value: T
    ok = True


@dataclass(frozen=True, slots=True)
class ParseFailure:
    errors: Tuple[FieldError, ...]
    ok = False


ParseResult = Union[ParseSuccess[T], ParseFailure]


class _EventFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("start", "end", check_fields=False)
    @classmethod
    def _attach_zone(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        if value is None or value.tzinfo is not None:
            return value
        zone = (info.context or {}).get("default_tz")
        if zone is None:
            raise ValueError("Timestamp must include a UTC offset")
        return value.replace(tzinfo=zone)


class _EventInputModel(_EventFields):
    title: Title
    description: Optional[str] = None
    location: Optional[str] = None
    color: Optional[Color] = None
    all_day: bool = Field(default=False, alias="allDay")
    start: datetime
    end: datetime
    time_zone: Optional[str] = Field(default=None, alias="timeZone")


class _EventPatchModel(_EventFields):
    title: Optional[Title] = None
    description: Optional[str] = None
    location: Optional[str] = None
    color: Optional[Color] = None
    all_day: Optional[bool] = Field(default=None, alias="allDay")
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    time_zone: Optional[str] = Field(default=None, alias="timeZone")


def _field_errors(exc: ValidationError) -> Tuple[FieldError, ...]:
    errors = []
    for error in exc.errors():
        location = error.get("loc") or ()
        name = str(location[0]) if location else None
        errors.append(FieldError(field=_PUBLIC_NAMES.get(name, name) if name else None, message=error["msg"]))
    return tuple(errors)


def _not_an_object() -> ParseFailure:
    return ParseFailure(errors=(FieldError(field=None, message="Payload must be a JSON object"),))


def parse_event_input(payload: Any, *, default_tz: Optional[tzinfo] = None) -> ParseResult[EventInput]:
    if not isinstance(payload, Mapping):
        return _not_an_object()
    try:
        model = _EventInputModel.model_validate(dict(payload), context={"default_tz": default_tz})
    except ValidationError as exc:
        return ParseFailure(errors=_field_errors(exc))
    if model.end <= model.start:
        return ParseFailure(errors=(FieldError(field="end", message="End time must be after start time"),))
    return ParseSuccess(
        EventInput(
            title=model.title,
            start=model.start,
            end=model.end,
            all_day=model.all_day,
            color=model.color,
            description=model.description,
            location=model.location,
            time_zone=model.time_zone,
        )
    )


def parse_event_patch(payload: Any, *, default_tz: Optional[tzinfo] = None) -> ParseResult[EventPatch]:
    """Validate a partial update; ``end > start`` is checked later against the merged event."""

    if not isinstance(payload, Mapping):
        return _not_an_object()
    try:
        model = _EventPatchModel.model_validate(dict(payload), context={"default_tz": default_tz})
    except ValidationError as exc:
        return ParseFailure(errors=_field_errors(exc))

    supplied = model.model_fields_set
    if not supplied:
        return ParseFailure(errors=(FieldError(field=None, message="No fields to update"),))

    nulls = [name for name in sorted(supplied & _NON_NULLABLE) if getattr(model, name) is None]
    if nulls:
        return ParseFailure(
            errors=tuple(FieldError(field=_PUBLIC_NAMES.get(name, name), message="Field may not be null") for name in nulls)
        )
    return ParseSuccess(EventPatch(changes={name: getattr(model, name) for name in supplied}))
