"""HTTP boundary for the calendar service."""

from .server import app, get_calendar_service, run_local_server

__all__ = ["app", "get_calendar_service", "run_local_server"]
