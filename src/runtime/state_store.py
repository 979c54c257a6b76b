"""JSON file store for host-owned state that outlives a panel."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

KEY_TOTAL_SESSIONS = "focusDev.totalSessions"
KEY_CLOCK_STATE = "focusDev.state"


class JsonStateStore:
    """Small key/value store persisted as one JSON object.

    Read failures degrade to an empty store and write failures are logged;
    neither is allowed to stop the clock.
    """

    def __init__(self, path: str | Path, logger: Optional[logging.Logger] = None):
        self._path = Path(path)
        self._logger = logger or logging.getLogger("state_store")

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def update(self, key: str, value: Any) -> bool:
        data = self._load()
        data[key] = value
        return self._write(data)

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as error:
            self._logger.warning("Failed to read state file %s: %s", self._path, error)
            return {}
        if not isinstance(data, dict):
            self._logger.warning("State file %s is not a JSON object", self._path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> bool:
        temp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(
                json.dumps(data, indent=2, sort_keys=True),
                encoding="utf-8",
            )
            os.replace(temp_path, self._path)
        except OSError as error:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            self._logger.error("Failed to write state file %s: %s", self._path, error)
            return False
        return True
