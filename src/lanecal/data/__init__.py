"""Data access layer."""

from __future__ import annotations

from .repositories import EventRepository, JsonEventRepository, SupabaseEventRepository
from .supabase import SupabaseGateway, SupabaseNotInitializedError

__all__ = [
    "EventRepository",
    "JsonEventRepository",
    "SupabaseEventRepository",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
]
