"""Wire payloads and shared service state for the HTTP boundary."""

from __future__ import annotations

from .serializers import serialize_error, serialize_event, serialize_view
from .state import ApiState, api_state

__all__ = ["ApiState", "api_state", "serialize_error", "serialize_event", "serialize_view"]
