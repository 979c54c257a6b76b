from __future__ import annotations

from typing import Any, Optional, Protocol

from app_config_schema import FocusSettings
from contracts.ui_protocol import EVENT_CLOCK, EVENT_CONFIG
from session_clock import ClockSnapshot

from .messages import clock_status_message


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_clock_update(
        self,
        snapshot: ClockSnapshot,
        *,
        action: str,
        total_sessions: Optional[int] = None,
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            "mode": snapshot.phase.value,
            "label": snapshot.phase.label,
            "remaining_seconds": snapshot.remaining_seconds,
            "duration_seconds": snapshot.duration_seconds,
            "running": snapshot.running,
            "completed_work_sessions": snapshot.completed_work_sessions,
            "progress": round(snapshot.elapsed_fraction, 4),
            "status": clock_status_message(snapshot),
        }
        if total_sessions is not None:
            payload["total_sessions"] = total_sessions
        if message:
            payload["message"] = message
        self.publish(EVENT_CLOCK, **payload)

    def publish_config(self, settings: FocusSettings) -> None:
        self.publish(EVENT_CONFIG, **settings.as_payload())
