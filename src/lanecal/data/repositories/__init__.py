"""Event repositories backing the calendar write and read paths."""

from __future__ import annotations

from .base import EventRepository
from .events import SupabaseEventRepository
from .local import JsonEventRepository

__all__ = ["EventRepository", "JsonEventRepository", "SupabaseEventRepository"]
