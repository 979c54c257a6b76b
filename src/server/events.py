"""Event encoding and replay cache for the panel websocket stream."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


def encode_event(
    event_type: str,
    payload: Mapping[str, Any],
    *,
    now_fn: Callable[[], datetime] | None = None,
) -> str:
    """JSON frame with `type` and ISO-8601 `timestamp` ahead of the payload."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    frame: dict[str, Any] = {"type": event_type, "timestamp": now.isoformat()}
    frame.update(payload)
    return json.dumps(frame)


class ReplayCache:
    """Keeps the newest frame per replayable event type.

    A client connecting mid-session gets config first, then the clock,
    then the last notification, so it can render without waiting a tick.
    """

    def __init__(self):
        self._frames: dict[str, str] = {}
        self._lock = threading.Lock()

    def record(self, event_type: str, frame: str) -> bool:
        if event_type not in STICKY_EVENT_TYPES:
            return False
        with self._lock:
            self._frames[event_type] = frame
        return True

    def replay(self) -> list[str]:
        with self._lock:
            frames = dict(self._frames)
        return [frames[event_type] for event_type in STICKY_EVENT_ORDER if event_type in frames]

    def clear(self) -> None:
        with self._lock:
            self._frames.clear()
