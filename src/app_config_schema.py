"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field

from session_clock import DurationConfig
from session_clock.constants import (
    DEFAULT_AUTO_START_NEXT,
    DEFAULT_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_INTERVAL,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_WORK_MINUTES,
)

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_STATE_FILE = ".focusdev/state.json"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class FocusSettings:
    """Session durations and cycle policy from `[focus]`, in minutes."""
    work_minutes: int = DEFAULT_WORK_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    long_break_minutes: int = DEFAULT_LONG_BREAK_MINUTES
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL
    auto_start_next: bool = DEFAULT_AUTO_START_NEXT

    def to_duration_config(self) -> DurationConfig:
        return DurationConfig(
            work_seconds=self.work_minutes * 60,
            break_seconds=self.break_minutes * 60,
            long_break_seconds=self.long_break_minutes * 60,
            long_break_interval=self.long_break_interval,
            auto_start_next=self.auto_start_next,
        )

    def as_payload(self) -> dict[str, object]:
        """Field names used on the UI wire."""
        return {
            "workMinutes": self.work_minutes,
            "breakMinutes": self.break_minutes,
            "longBreakMinutes": self.long_break_minutes,
            "longBreakInterval": self.long_break_interval,
            "autoStartNext": self.auto_start_next,
        }


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class StateSettings:
    """Location of the JSON state file from `[state]`."""
    state_file: str = ""
    config_poll_seconds: float = 2.0


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    focus: FocusSettings = field(default_factory=FocusSettings)
    ui_server: UIServerSettings = field(default_factory=UIServerSettings)
    state: StateSettings = field(default_factory=StateSettings)
    source_file: str = ""
