"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, CalendarSettings, ServerSettings, StorageSettings, SupabaseSettings, get_settings

__all__ = [
    "AppSettings",
    "CalendarSettings",
    "ServerSettings",
    "StorageSettings",
    "SupabaseSettings",
    "get_settings",
]
