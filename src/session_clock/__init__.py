from .clock import SessionClock
from .countdown import Countdown, LoopCountdown, ThreadCountdown
from .snapshot import SnapshotFormatError, deserialize, serialize
from .types import (
    ClockSnapshot,
    ClockState,
    ClockTick,
    DurationConfig,
    Phase,
    SessionCompleted,
)

__all__ = [
    "ClockSnapshot",
    "ClockState",
    "ClockTick",
    "Countdown",
    "DurationConfig",
    "LoopCountdown",
    "Phase",
    "SessionClock",
    "SessionCompleted",
    "SnapshotFormatError",
    "ThreadCountdown",
    "deserialize",
    "serialize",
]
