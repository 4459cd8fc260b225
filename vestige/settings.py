"""
Persistent host settings.

A small JSON key-value store for settings that outlive a project, such as
the master volume and whether the introduction tour was completed. The
engine never reads it; hosts inject it where they need it.

Reads merge stored values over defaults, so keys added in later releases
appear with their default and keys this release does not know are kept.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "volume": 0.5,
    "tour_complete": False,
}


def default_settings() -> dict[str, Any]:
    return dict(DEFAULT_SETTINGS)


class PersistentSettings:
    """JSON-file backed settings store.

    Example:
        settings = PersistentSettings("~/.config/vestige/settings.json")
        volume = settings.load()["volume"]
        settings.update(tour_complete=True)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self) -> dict[str, Any]:
        """Stored settings merged over defaults.

        A missing file is created with the defaults. An unreadable file is
        logged and treated as empty.
        """
        if not self.path.exists():
            data = default_settings()
            self.save(data)
            return data

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read settings from {self.path}: {e}")
            return default_settings()

        if not isinstance(stored, dict):
            logger.warning(f"Ignoring settings file {self.path}: not a JSON object")
            return default_settings()

        return {**default_settings(), **stored}

    def save(self, data: dict[str, Any]) -> None:
        """Write ``data`` atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=".settings-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def update(self, **changes: Any) -> dict[str, Any]:
        """Merge ``changes`` into the stored settings and return the result."""
        data = {**self.load(), **changes}
        self.save(data)
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self.load().get(key, default)
