"""Host-side handling of session completion and settings requests."""

from __future__ import annotations

import logging
from typing import Optional

from app_config_schema import FocusSettings
from contracts.ui_protocol import EVENT_NOTIFICATION, EVENT_SETTINGS
from session_clock import SessionCompleted

from .messages import session_complete_text
from .state_store import KEY_TOTAL_SESSIONS, JsonStateStore
from .ui import RuntimeUIPublisher


class HostNotifier:
    """Counts completed sessions for the lifetime of the host, not the clock."""

    def __init__(
        self,
        *,
        store: JsonStateStore,
        ui: RuntimeUIPublisher,
        config_path: str = "",
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._ui = ui
        self._config_path = config_path
        self._logger = logger or logging.getLogger("host_notifier")

    @property
    def total_sessions(self) -> int:
        value = self._store.get(KEY_TOTAL_SESSIONS, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            self._logger.warning("Ignoring invalid stored session total: %r", value)
            return 0
        return value

    def session_complete(self, event: SessionCompleted) -> int:
        updated = self.total_sessions + 1
        self._store.update(KEY_TOTAL_SESSIONS, updated)
        text = session_complete_text(updated)
        self._logger.info(
            "Session complete: phase=%s at=%s total=%d",
            event.phase.value,
            event.timestamp.isoformat(),
            updated,
        )
        self._ui.publish(
            EVENT_NOTIFICATION,
            text=text,
            phase=event.phase.value,
            total_sessions=updated,
        )
        return updated

    def open_settings(self, settings: FocusSettings) -> None:
        self._logger.info("Settings requested; edit [focus] in %s", self._config_path or "config.toml")
        self._ui.publish(
            EVENT_SETTINGS,
            config_file=self._config_path,
            section="focus",
            **settings.as_payload(),
        )
