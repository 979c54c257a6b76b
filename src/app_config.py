"""Config file loading and the push/pull provider for focus settings."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Callable, Mapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_STATE_FILE,
    AppConfig,
    AppConfigurationError,
    FocusSettings,
    StateSettings,
    UIServerSettings,
)
from session_clock import DurationConfig

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "ConfigProvider",
    "FocusSettings",
    "StateSettings",
    "UIServerSettings",
    "load_app_config",
    "resolve_config_path",
]

SettingsListener = Callable[[FocusSettings], None]


def resolve_config_path(config_path: str | None = None) -> Path:
    raw = config_path or os.getenv("APP_CONFIG_FILE") or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_app_config(
    config_path: str | None = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> AppConfig:
    """Load `config.toml`; an absent implicit default file yields defaults."""
    explicit = config_path is not None or bool(os.getenv("APP_CONFIG_FILE"))
    path = resolve_config_path(config_path)
    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        return _default_app_config(path)
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    raw = _read_toml(path)
    return parse_app_config(
        raw,
        base_dir=path.parent,
        source_file=str(path),
        logger=logger,
    )


def _default_app_config(path: Path) -> AppConfig:
    return AppConfig(
        state=StateSettings(state_file=str((path.parent / DEFAULT_STATE_FILE).resolve())),
        source_file=str(path),
    )


def _read_toml(path: Path) -> Mapping:
    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")
    return raw


class ConfigProvider:
    """Holds the current focus settings and pushes changes to subscribers."""

    def __init__(
        self,
        app_config: AppConfig,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._app_config = app_config
        self._logger = logger or logging.getLogger("app_config")
        self._listeners: list[SettingsListener] = []
        self._last_mtime = self._source_mtime()

    @property
    def source_file(self) -> str:
        return self._app_config.source_file

    @property
    def app_config(self) -> AppConfig:
        return self._app_config

    def current(self) -> FocusSettings:
        return self._app_config.focus

    def duration_config(self) -> DurationConfig:
        return self.current().to_duration_config()

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def apply(self, settings: FocusSettings) -> bool:
        """Replace the focus settings; notify subscribers when anything changed."""
        if settings == self._app_config.focus:
            return False
        self._app_config = replace(self._app_config, focus=settings)
        self._logger.info(
            "Focus settings updated: work=%dm break=%dm long_break=%dm "
            "interval=%d auto_start_next=%s",
            settings.work_minutes,
            settings.break_minutes,
            settings.long_break_minutes,
            settings.long_break_interval,
            settings.auto_start_next,
        )
        for listener in tuple(self._listeners):
            try:
                listener(settings)
            except Exception as error:
                self._logger.error(
                    "Settings listener failed: %s",
                    error,
                    exc_info=True,
                )
        return True

    def reload(self) -> bool:
        """Re-read the source file; keep current settings if it is invalid."""
        path = Path(self._app_config.source_file)
        self._last_mtime = self._source_mtime()
        if not path.is_file():
            return False
        try:
            reloaded = parse_app_config(
                _read_toml(path),
                base_dir=path.parent,
                source_file=str(path),
                logger=self._logger,
            )
        except AppConfigurationError as error:
            self._logger.error("Ignoring invalid config update: %s", error)
            return False
        return self.apply(reloaded.focus)

    def reload_if_modified(self) -> bool:
        mtime = self._source_mtime()
        if mtime is None or mtime == self._last_mtime:
            return False
        return self.reload()

    def _source_mtime(self) -> Optional[float]:
        if not self._app_config.source_file:
            return None
        try:
            return Path(self._app_config.source_file).stat().st_mtime
        except OSError:
            return None
