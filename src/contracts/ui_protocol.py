"""Web UI websocket message and event constants."""

from __future__ import annotations

# Inbound control messages (UI -> panel)
MESSAGE_START = "start"
MESSAGE_PAUSE = "pause"
MESSAGE_RESET = "reset"
MESSAGE_SKIP = "skip"
MESSAGE_OPEN_SETTINGS = "openSettings"
MESSAGE_REQUEST_CONFIG = "requestConfig"

# Outbound websocket event types (panel -> UI)
EVENT_HELLO = "hello"
EVENT_CLOCK = "clock"
EVENT_CONFIG = "config"
EVENT_SESSION_COMPLETE = "session_complete"
EVENT_NOTIFICATION = "notification"
EVENT_SETTINGS = "settings"
EVENT_ERROR = "error"

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_CLOCK,
        EVENT_CONFIG,
        EVENT_NOTIFICATION,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_CONFIG,
    EVENT_CLOCK,
    EVENT_NOTIFICATION,
)
