"""Phase, action, and default constants used by the session clock."""

from __future__ import annotations

DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_LONG_BREAK_MINUTES = 15
DEFAULT_LONG_BREAK_INTERVAL = 4
DEFAULT_AUTO_START_NEXT = False

MIN_LONG_BREAK_INTERVAL = 1

TICK_INTERVAL_SECONDS = 1.0

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESET = "reset"
ACTION_SKIP = "skip"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"
ACTION_CONFIG = "config"
ACTION_RESTORE = "restore"
