"""Serialization of the four-field clock snapshot persisted by the UI layer."""

from __future__ import annotations

from typing import Any, Mapping

from .types import ClockState, Phase

KEY_MODE = "mode"
KEY_REMAINING = "remaining"
KEY_RUNNING = "running"
KEY_COMPLETED_WORK_SESSIONS = "completedWorkSessions"


class SnapshotFormatError(Exception):
    """Raised when a persisted snapshot cannot be decoded."""


def serialize(state: ClockState) -> dict[str, Any]:
    """Encode clock state as a JSON-compatible mapping."""
    return {
        KEY_MODE: state.phase.value,
        KEY_REMAINING: int(state.remaining_seconds),
        KEY_RUNNING: bool(state.running),
        KEY_COMPLETED_WORK_SESSIONS: int(state.completed_work_sessions),
    }


def deserialize(raw: Any) -> ClockState:
    """Decode a persisted mapping back into clock state.

    Range clamping against the active durations is left to the clock.
    """
    if not isinstance(raw, Mapping):
        raise SnapshotFormatError("Snapshot must be a mapping.")

    mode = raw.get(KEY_MODE)
    try:
        phase = Phase(mode)
    except ValueError as error:
        raise SnapshotFormatError(f"Unknown snapshot mode: {mode!r}") from error

    running = raw.get(KEY_RUNNING, False)
    if not isinstance(running, bool):
        raise SnapshotFormatError(f"{KEY_RUNNING} must be a boolean.")

    return ClockState(
        phase=phase,
        remaining_seconds=_non_negative_int(raw.get(KEY_REMAINING), KEY_REMAINING),
        running=running,
        completed_work_sessions=_non_negative_int(
            raw.get(KEY_COMPLETED_WORK_SESSIONS, 0),
            KEY_COMPLETED_WORK_SESSIONS,
        ),
    )


def _non_negative_int(value: Any, field: str) -> int:
    # JSON has no int/float split; accept integral floats, reject bools.
    if isinstance(value, bool):
        raise SnapshotFormatError(f"{field} must be an integer.")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise SnapshotFormatError(f"{field} must be an integer.")
    if value < 0:
        raise SnapshotFormatError(f"{field} must not be negative.")
    return value
