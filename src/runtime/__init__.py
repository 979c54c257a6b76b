"""Focus panel shell exports."""

from .dispatch import ClockCommandRouter
from .notifier import HostNotifier
from .panel import FocusPanel, PanelNotActiveError
from .state_store import JsonStateStore
from .ui import RuntimeUIPublisher

__all__ = [
    "ClockCommandRouter",
    "FocusPanel",
    "HostNotifier",
    "JsonStateStore",
    "PanelNotActiveError",
    "RuntimeUIPublisher",
]
