"""UI state objects, independent of any widget toolkit."""

from __future__ import annotations

from .state import (
    CalendarUiState,
    DialogMode,
    DialogState,
    EventDialog,
    InvalidTransitionError,
    submit_dialog,
)

__all__ = [
    "CalendarUiState",
    "DialogMode",
    "DialogState",
    "EventDialog",
    "InvalidTransitionError",
    "submit_dialog",
]
