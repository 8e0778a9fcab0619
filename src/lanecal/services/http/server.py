from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from hypercorn.asyncio import serve
from hypercorn.config import Config

from ...api import api_state, serialize_error, serialize_event, serialize_view
from ...core.ranges import TimeRange
from ...core.window import window_for
from ...domain import (
    CalendarError,
    CalendarView,
    EventConflictError,
    EventNotFoundError,
    EventValidationError,
    FieldError,
)
from ..calendar import CalendarService
from ..render import render_view

logger = logging.getLogger(__name__)

app = FastAPI(title="Lanecal API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STATUS_BY_ERROR = {
    EventValidationError: 400,
    EventNotFoundError: 404,
    EventConflictError: 409,
}


def get_calendar_service() -> CalendarService:
    return api_state.calendar


def _error_response(error: CalendarError) -> JSONResponse:
    status = _STATUS_BY_ERROR.get(type(error), 500)
    if status == 500:
        return JSONResponse(serialize_error(error, message="Unable to process request"), status_code=500)
    return JSONResponse(serialize_error(error), status_code=status)


@app.exception_handler(CalendarError)
async def _handle_calendar_error(_request: Request, exc: CalendarError) -> JSONResponse:
    return _error_response(exc)


def _parse_instant(name: str, value: Optional[str]) -> datetime:
    if not value:
        raise EventValidationError([FieldError(field=name, message="Query parameter is required")])
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise EventValidationError([FieldError(field=name, message="Invalid ISO timestamp")]) from exc
    if parsed.tzinfo is None:
        raise EventValidationError([FieldError(field=name, message="Timestamp must include a UTC offset")])
    return parsed


def _request_errors(exc: RequestValidationError) -> List[FieldError]:
    errors = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            errors.append(FieldError(field=None, message="Invalid JSON payload"))
            continue
        location = error.get("loc") or ()
        field = str(location[-1]) if len(location) > 1 and location[0] in ("path", "query") else None
        errors.append(FieldError(field=field, message=error.get("msg", "Invalid request")))
    return errors


@app.exception_handler(RequestValidationError)
async def _handle_request_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(EventValidationError(_request_errors(exc)))


@app.get("/api/events")
def list_events(
    start: Optional[str] = Query(default=None),
    end: Optional[str] = Query(default=None),
    service: CalendarService = Depends(get_calendar_service),
) -> JSONResponse:
    window = TimeRange(_parse_instant("start", start), _parse_instant("end", end))
    events = service.list_events(window)
    return JSONResponse([serialize_event(event) for event in events])


@app.post("/api/events")
def create_event(
    payload: Any = Body(default=None), service: CalendarService = Depends(get_calendar_service)
) -> JSONResponse:
    event = service.create_event(payload)
    return JSONResponse(serialize_event(event), status_code=201)


@app.patch("/api/events/{event_id}")
def update_event(
    event_id: str, payload: Any = Body(default=None), service: CalendarService = Depends(get_calendar_service)
) -> JSONResponse:
    event = service.update_event(event_id, payload)
    return JSONResponse(serialize_event(event))


@app.delete("/api/events/{event_id}")
def delete_event(event_id: str, service: CalendarService = Depends(get_calendar_service)) -> Dict[str, Any]:
    service.delete_event(event_id)
    return {"ok": True}


@app.get("/api/views/{view}")
def view_layout(
    view: CalendarView,
    anchor: Optional[str] = Query(default=None),
    service: CalendarService = Depends(get_calendar_service),
) -> JSONResponse:
    now = service.context.now()
    anchor_dt = _parse_instant("anchor", anchor) if anchor else now
    settings = service.context.settings.calendar
    window = window_for(anchor_dt, view, week_start=settings.week_start)
    events = service.list_events(window)
    rendered = render_view(anchor_dt, view, events, settings, now=now)
    return JSONResponse(serialize_view(rendered))


async def _serve(config: Config) -> None:
    await serve(app, config)


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving Lanecal API on %s:%s", host, port)
    asyncio.run(_serve(config))
