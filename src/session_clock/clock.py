"""Pomodoro session state machine with wall-clock delta ticking."""

from __future__ import annotations

import datetime as dt
import logging
import time
from typing import Callable, Optional

from .constants import TICK_INTERVAL_SECONDS
from .countdown import Countdown
from .types import (
    ClockSnapshot,
    ClockState,
    ClockTick,
    DurationConfig,
    Phase,
    SessionCompleted,
)

CompletionListener = Callable[[SessionCompleted], None]
TickListener = Callable[[ClockTick], None]


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class SessionClock:
    """Single work/break cycle clock owned by one UI surface.

    Not thread-safe: the countdown callback and control commands must be
    delivered on the same execution context.
    """

    def __init__(
        self,
        config: DurationConfig,
        *,
        countdown: Countdown,
        state: Optional[ClockState] = None,
        now_fn: Callable[[], float] = time.monotonic,
        wall_clock_fn: Callable[[], dt.datetime] = _utc_now,
        tick_interval_seconds: float = TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._countdown = countdown
        self._now = now_fn
        self._wall_clock = wall_clock_fn
        self._tick_interval_seconds = tick_interval_seconds
        self._logger = logger or logging.getLogger("session_clock")
        self._completion_listeners: list[CompletionListener] = []
        self._tick_listeners: list[TickListener] = []

        initial = state or ClockState.initial(config)
        self._phase = initial.phase
        self._remaining = max(
            0,
            min(int(initial.remaining_seconds), config.duration_for(initial.phase)),
        )
        self._completed_work_sessions = max(0, int(initial.completed_work_sessions))
        self._running = False
        self._last_tick_at: Optional[float] = None

        if initial.running:
            # Restored running clocks count on from now, no catch-up.
            self.start()

    @property
    def config(self) -> DurationConfig:
        return self._config

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._running

    @property
    def completed_work_sessions(self) -> int:
        return self._completed_work_sessions

    def duration_for(self, phase: Phase) -> int:
        return self._config.duration_for(phase)

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            phase=self._phase,
            remaining_seconds=self._remaining,
            running=self._running,
            completed_work_sessions=self._completed_work_sessions,
            duration_seconds=self.duration_for(self._phase),
        )

    def subscribe(self, listener: CompletionListener) -> Callable[[], None]:
        """Register a completion listener; returns an unsubscribe callable."""
        self._completion_listeners.append(listener)
        return lambda: self._discard(self._completion_listeners, listener)

    def subscribe_ticks(self, listener: TickListener) -> Callable[[], None]:
        self._tick_listeners.append(listener)
        return lambda: self._discard(self._tick_listeners, listener)

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._last_tick_at = self._now()
        self._countdown.arm(self.poll, self._tick_interval_seconds)
        self._logger.info(
            "Clock started: phase=%s remaining=%ss",
            self._phase.value,
            self._remaining,
        )

    def pause(self) -> None:
        if not self._running:
            return
        self._halt()
        self._logger.info(
            "Clock paused: phase=%s remaining=%ss",
            self._phase.value,
            self._remaining,
        )

    def reset(self) -> None:
        self.pause()
        self._remaining = self.duration_for(self._phase)
        self._logger.info(
            "Clock reset: phase=%s remaining=%ss",
            self._phase.value,
            self._remaining,
        )

    def skip(self) -> None:
        self._logger.info(
            "Clock skipped: phase=%s remaining=%ss",
            self._phase.value,
            self._remaining,
        )
        self.complete_session()

    def poll(self) -> None:
        """Consume whole seconds of real time elapsed since the last tick.

        Called by the countdown. Delayed or coalesced callbacks fast-forward in
        a single step; the sub-second remainder stays on the baseline.
        """
        if not self._running or self._last_tick_at is None:
            return
        elapsed = int(max(0.0, self._now() - self._last_tick_at))
        if elapsed < 1:
            return
        self._last_tick_at += elapsed
        self.tick(elapsed)

    def tick(self, elapsed_seconds: int) -> None:
        if not self._running:
            return
        elapsed = max(0, int(elapsed_seconds))
        self._remaining = max(0, self._remaining - elapsed)
        completed = self._remaining == 0
        if completed:
            self.complete_session()
        self._emit_tick(
            ClockTick(
                snapshot=self.snapshot(),
                elapsed_seconds=elapsed,
                completed=completed,
            )
        )

    def complete_session(self) -> None:
        ended = self._phase
        self._emit_completed(SessionCompleted(phase=ended, timestamp=self._wall_clock()))

        if ended == Phase.WORK:
            self._completed_work_sessions += 1
            if self._completed_work_sessions % self._config.long_break_interval == 0:
                next_phase = Phase.LONG_BREAK
            else:
                next_phase = Phase.SHORT_BREAK
        else:
            next_phase = Phase.WORK

        self._phase = next_phase
        self._remaining = self.duration_for(next_phase)
        self._logger.info(
            "Session completed: ended=%s next=%s completed_work_sessions=%d",
            ended.value,
            next_phase.value,
            self._completed_work_sessions,
        )

        self._halt()
        if self._config.auto_start_next:
            self.start()

    def reconcile_config(self, config: DurationConfig) -> None:
        """Apply new durations, clamping the current countdown down only."""
        self._config = config
        ceiling = self.duration_for(self._phase)
        if self._remaining > ceiling:
            self._logger.info(
                "Remaining time clamped to new %s duration: %ss -> %ss",
                self._phase.value,
                self._remaining,
                ceiling,
            )
            self._remaining = ceiling

    def _halt(self) -> None:
        self._countdown.disarm()
        self._running = False
        self._last_tick_at = None

    def _emit_completed(self, event: SessionCompleted) -> None:
        for listener in tuple(self._completion_listeners):
            try:
                listener(event)
            except Exception as error:
                self._logger.error(
                    "Session completion listener failed: %s",
                    error,
                    exc_info=True,
                )

    def _emit_tick(self, tick: ClockTick) -> None:
        for listener in tuple(self._tick_listeners):
            try:
                listener(tick)
            except Exception as error:
                self._logger.error("Tick listener failed: %s", error, exc_info=True)

    @staticmethod
    def _discard(listeners: list, listener) -> None:
        if listener in listeners:
            listeners.remove(listener)
