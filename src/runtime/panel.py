"""Focus panel: one UI surface owning one session clock."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from app_config import ConfigProvider
from app_config_schema import FocusSettings
from contracts.ui_protocol import EVENT_SESSION_COMPLETE
from session_clock import (
    ClockState,
    ClockTick,
    Countdown,
    SessionClock,
    SessionCompleted,
    SnapshotFormatError,
    deserialize,
    serialize,
)
from session_clock.constants import (
    ACTION_COMPLETED,
    ACTION_CONFIG,
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_RESTORE,
    ACTION_SKIP,
    ACTION_START,
    ACTION_TICK,
)

from .messages import next_phase_text
from .notifier import HostNotifier
from .state_store import KEY_CLOCK_STATE, JsonStateStore
from .ui import RuntimeUIPublisher


class PanelNotActiveError(RuntimeError):
    """Raised when a clock command reaches a panel that is not activated."""


class FocusPanel:
    """Creates, restores, drives, and persists a single `SessionClock`."""

    def __init__(
        self,
        *,
        config_provider: ConfigProvider,
        notifier: HostNotifier,
        store: JsonStateStore,
        ui: RuntimeUIPublisher,
        countdown: Countdown,
        now_fn: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self._config_provider = config_provider
        self._notifier = notifier
        self._store = store
        self._ui = ui
        self._countdown = countdown
        self._now = now_fn
        self._logger = logger or logging.getLogger("focus_panel")
        self._clock: Optional[SessionClock] = None
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def is_active(self) -> bool:
        return self._clock is not None

    @property
    def clock(self) -> SessionClock:
        if self._clock is None:
            raise PanelNotActiveError("Focus panel is not active")
        return self._clock

    def activate(self) -> SessionClock:
        if self._clock is not None:
            return self._clock

        settings = self._config_provider.current()
        clock = SessionClock(
            settings.to_duration_config(),
            countdown=self._countdown,
            state=self._restore_state(),
            now_fn=self._now,
            logger=logging.getLogger("session_clock"),
        )
        self._clock = clock
        self._unsubscribers = [
            clock.subscribe(self._on_session_completed),
            clock.subscribe_ticks(self._on_tick),
            self._config_provider.subscribe(self._on_config_changed),
        ]

        snapshot = clock.snapshot()
        self._logger.info(
            "Focus panel activated: phase=%s remaining=%ss running=%s",
            snapshot.phase.value,
            snapshot.remaining_seconds,
            snapshot.running,
        )
        self._ui.publish_config(settings)
        self._ui.publish_clock_update(
            snapshot,
            action=ACTION_RESTORE,
            total_sessions=self._notifier.total_sessions,
        )
        return clock

    def dispose(self) -> None:
        """Persist the last snapshot and stop counting."""
        if self._clock is None:
            return
        self._persist()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._countdown.disarm()
        self._clock = None
        self._logger.info("Focus panel disposed")

    def start(self) -> None:
        self._run_command(ACTION_START, self.clock.start)

    def pause(self) -> None:
        self._run_command(ACTION_PAUSE, self.clock.pause)

    def reset(self) -> None:
        self._run_command(ACTION_RESET, self.clock.reset)

    def skip(self) -> None:
        self._run_command(ACTION_SKIP, self.clock.skip)

    def open_settings(self) -> None:
        self._notifier.open_settings(self._config_provider.current())

    def request_config(self) -> None:
        # A changed file is pushed through _on_config_changed.
        self._config_provider.reload_if_modified()
        self._ui.publish_config(self._config_provider.current())

    def _run_command(self, action: str, operation: Callable[[], None]) -> None:
        operation()
        self._persist()
        self._ui.publish_clock_update(self.clock.snapshot(), action=action)

    def _on_config_changed(self, settings: FocusSettings) -> None:
        clock = self.clock
        clock.reconcile_config(settings.to_duration_config())
        self._persist()
        self._ui.publish_config(settings)
        self._ui.publish_clock_update(clock.snapshot(), action=ACTION_CONFIG)

    def _on_session_completed(self, event: SessionCompleted) -> None:
        total = self._notifier.session_complete(event)
        self._ui.publish(
            EVENT_SESSION_COMPLETE,
            phase=event.phase.value,
            completed_at=event.timestamp.isoformat(),
            total_sessions=total,
        )

    def _on_tick(self, tick: ClockTick) -> None:
        if not tick.completed:
            self._ui.publish_clock_update(tick.snapshot, action=ACTION_TICK)
            return
        self._persist()
        self._ui.publish_clock_update(
            tick.snapshot,
            action=ACTION_COMPLETED,
            total_sessions=self._notifier.total_sessions,
            message=next_phase_text(tick.snapshot),
        )

    def _persist(self) -> None:
        if self._clock is None:
            return
        self._store.update(KEY_CLOCK_STATE, serialize(self._clock.snapshot()))

    def _restore_state(self) -> Optional[ClockState]:
        raw = self._store.get(KEY_CLOCK_STATE)
        if raw is None:
            return None
        try:
            return deserialize(raw)
        except SnapshotFormatError as error:
            self._logger.warning("Discarding persisted clock state: %s", error)
            return None
