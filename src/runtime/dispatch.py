"""Router that applies inbound UI control messages to the focus panel."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from contracts.ui_protocol import (
    EVENT_ERROR,
    MESSAGE_OPEN_SETTINGS,
    MESSAGE_PAUSE,
    MESSAGE_REQUEST_CONFIG,
    MESSAGE_RESET,
    MESSAGE_SKIP,
    MESSAGE_START,
)

from .panel import FocusPanel, PanelNotActiveError
from .ui import RuntimeUIPublisher


class ClockCommandRouter:
    """Maps `{"type": ...}` messages to panel operations.

    Unknown or malformed messages are logged and ignored.
    """

    def __init__(
        self,
        *,
        panel: FocusPanel,
        ui: RuntimeUIPublisher,
        logger: Optional[logging.Logger] = None,
    ):
        self._panel = panel
        self._ui = ui
        self._logger = logger or logging.getLogger("focus_panel")
        self._handlers: dict[str, Callable[[], None]] = {
            MESSAGE_START: panel.start,
            MESSAGE_PAUSE: panel.pause,
            MESSAGE_RESET: panel.reset,
            MESSAGE_SKIP: panel.skip,
            MESSAGE_OPEN_SETTINGS: panel.open_settings,
            MESSAGE_REQUEST_CONFIG: panel.request_config,
        }

    def handle_raw(self, raw: str | bytes) -> bool:
        """Decode a websocket frame and route it."""
        try:
            message = json.loads(raw)
        except ValueError as error:
            self._logger.warning("Ignoring malformed UI message: %s", error)
            return False
        return self.handle(message)

    def handle(self, message: Any) -> bool:
        if not isinstance(message, dict):
            self._logger.warning("Ignoring non-object UI message: %r", message)
            return False

        message_type = message.get("type")
        handler = (
            self._handlers.get(message_type)
            if isinstance(message_type, str)
            else None
        )
        if handler is None:
            self._logger.warning("Ignoring unknown UI message: %r", message)
            return False

        try:
            handler()
        except PanelNotActiveError as error:
            self._logger.warning("Dropping %s message: %s", message_type, error)
            self._ui.publish(EVENT_ERROR, message=str(error), request=message_type)
            return False
        self._logger.debug("Handled UI message: %s", message_type)
        return True
