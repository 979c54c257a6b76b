"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from app_config_schema import (
    DEFAULT_STATE_FILE,
    AppConfig,
    AppConfigurationError,
    FocusSettings,
    StateSettings,
    UIServerSettings,
)
from session_clock.constants import MIN_LONG_BREAK_INTERVAL

_MIN_MINUTES = 1


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
    logger: Optional[logging.Logger] = None,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    log = logger or logging.getLogger("app_config")
    focus = parse_focus_settings(_section(raw, "focus"), logger=log)
    ui_server = _parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir)
    state = _parse_state_settings(_section(raw, "state"), base_dir=base_dir)

    return AppConfig(
        focus=focus,
        ui_server=ui_server,
        state=state,
        source_file=source_file,
    )


def parse_focus_settings(
    section: Mapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
) -> FocusSettings:
    """Parse `[focus]`, clamping non-positive values instead of failing."""
    log = logger or logging.getLogger("app_config")
    defaults = FocusSettings()
    return FocusSettings(
        work_minutes=_clamped_int(
            section.get("work_minutes", defaults.work_minutes),
            "focus.work_minutes",
            _MIN_MINUTES,
            log,
        ),
        break_minutes=_clamped_int(
            section.get("break_minutes", defaults.break_minutes),
            "focus.break_minutes",
            _MIN_MINUTES,
            log,
        ),
        long_break_minutes=_clamped_int(
            section.get("long_break_minutes", defaults.long_break_minutes),
            "focus.long_break_minutes",
            _MIN_MINUTES,
            log,
        ),
        long_break_interval=_clamped_int(
            section.get("long_break_interval", defaults.long_break_interval),
            "focus.long_break_interval",
            MIN_LONG_BREAK_INTERVAL,
            log,
        ),
        auto_start_next=_as_bool(
            section.get("auto_start_next", defaults.auto_start_next),
            "focus.auto_start_next",
        ),
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _parse_state_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> StateSettings:
    state_file = _as_str(
        section.get("state_file", DEFAULT_STATE_FILE),
        "state.state_file",
    ) or DEFAULT_STATE_FILE
    poll_seconds = _as_float(
        section.get("config_poll_seconds", 2.0),
        "state.config_poll_seconds",
    )
    if poll_seconds <= 0:
        raise AppConfigurationError("state.config_poll_seconds must be positive.")
    return StateSettings(
        state_file=_resolve_path(base_dir, state_file),
        config_poll_seconds=poll_seconds,
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _clamped_int(
    value: Any,
    field: str,
    minimum: int,
    logger: logging.Logger,
) -> int:
    number = _as_int(value, field)
    if number < minimum:
        logger.warning(
            "%s=%d is below the minimum of %d; using %d",
            field,
            number,
            minimum,
            minimum,
        )
        return minimum
    return number


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
