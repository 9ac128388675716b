from __future__ import annotations

import time
from typing import Any

_MAX_EVENTS = 10_000

_events: list[dict[str, Any]] = []


def record_event(event_type: str, user_id: str | None, data: dict[str, Any]) -> None:
    _events.append({
        "type": event_type,
        "user_id": user_id,
        "timestamp": time.time(),
        **data,
    })
    # Keep only the most recent events in memory
    if len(_events) > _MAX_EVENTS:
        del _events[: len(_events) - _MAX_EVENTS]


def get_events(event_type: str | None = None) -> list[dict[str, Any]]:
    if event_type is None:
        return _events
    return [e for e in _events if e["type"] == event_type]


def clear_events() -> None:
    _events.clear()
