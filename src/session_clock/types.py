"""Value types shared by the session clock, its codec, and the UI shell."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum

from .constants import (
    DEFAULT_AUTO_START_NEXT,
    DEFAULT_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_INTERVAL,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_WORK_MINUTES,
)


class Phase(str, Enum):
    """Active phase of the clock. Values match the persisted `mode` field."""

    WORK = "work"
    SHORT_BREAK = "break"
    LONG_BREAK = "longbreak"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]


_PHASE_LABELS = {
    Phase.WORK: "Work",
    Phase.SHORT_BREAK: "Short break",
    Phase.LONG_BREAK: "Long break",
}


@dataclass(frozen=True)
class DurationConfig:
    """Phase lengths in seconds plus cycle policy, already validated."""

    work_seconds: int = DEFAULT_WORK_MINUTES * 60
    break_seconds: int = DEFAULT_BREAK_MINUTES * 60
    long_break_seconds: int = DEFAULT_LONG_BREAK_MINUTES * 60
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL
    auto_start_next: bool = DEFAULT_AUTO_START_NEXT

    def duration_for(self, phase: Phase) -> int:
        if phase == Phase.WORK:
            return self.work_seconds
        if phase == Phase.SHORT_BREAK:
            return self.break_seconds
        return self.long_break_seconds


@dataclass(frozen=True)
class ClockState:
    """The four fields that round-trip through the persisted snapshot."""

    phase: Phase
    remaining_seconds: int
    running: bool
    completed_work_sessions: int

    @classmethod
    def initial(cls, config: DurationConfig) -> "ClockState":
        return cls(
            phase=Phase.WORK,
            remaining_seconds=config.duration_for(Phase.WORK),
            running=False,
            completed_work_sessions=0,
        )


@dataclass(frozen=True)
class ClockSnapshot(ClockState):
    """Immutable clock state exposed to the UI, with the active phase length."""

    duration_seconds: int

    @property
    def elapsed_fraction(self) -> float:
        if self.duration_seconds <= 0:
            return 0.0
        done = self.duration_seconds - self.remaining_seconds
        return max(0.0, min(1.0, done / self.duration_seconds))


@dataclass(frozen=True)
class SessionCompleted:
    """Emitted once per finished phase, including phases ended by skip."""

    phase: Phase
    timestamp: dt.datetime


@dataclass(frozen=True)
class ClockTick:
    """Tick payload emitted after the countdown consumed elapsed time."""

    snapshot: ClockSnapshot
    elapsed_seconds: int
    completed: bool = False
