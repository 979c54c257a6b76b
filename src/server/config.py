"""Configuration model for the focus panel websocket server."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from app_config_schema import UIServerSettings

WEBSOCKET_PATH = "/ws"
ROOT_PATHS = ("/", "/index.html")
HEALTHZ_PATH = "/healthz"
MAX_PORT = 65535


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


def _check_index_file(raw: str) -> None:
    path = Path(raw)
    if not path.is_file():
        problem = "is not a file" if path.exists() else "does not exist"
        raise ServerConfigurationError(f"ui_server.index_file {problem}: {path}")


@dataclass(frozen=True)
class UIServerConfig:
    """Validated server settings; an empty `index_file` serves a plain page."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("ui_server.host cannot be empty")
        if not 0 < self.port <= MAX_PORT:
            raise ServerConfigurationError(
                f"ui_server.port must be between 1 and {MAX_PORT}, got: {self.port}"
            )
        # A disabled server never reads the index page.
        if self.enabled and self.index_file:
            _check_index_file(self.index_file)

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @classmethod
    def from_settings(cls, settings: UIServerSettings) -> "UIServerConfig":
        return cls(
            enabled=settings.enabled,
            host=settings.host.strip(),
            port=settings.port,
            index_file=(settings.index_file or "").strip(),
        )
