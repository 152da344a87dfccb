"""User settings stored as JSON under the XDG config directory."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from hound.utils import xdg_config_home

log = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 32


class Settings:
    """Nested JSON settings addressed by dotted keys.

    ``walker.concurrency`` is the only key hound reads itself; ``hound config``
    can store anything else.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or xdg_config_home() / "hound" / "settings.json"
        self._data = self._read()

    @classmethod
    def instance(cls) -> Settings:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get(self, key: str, default: Any = None) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing scalar parents, and save."""
        *parents, leaf = key.split(".")
        node = self._data
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = value
        self._write()

    def concurrency(self) -> int:
        """Ceiling on in-flight filesystem calls per query."""
        value = self.get("walker.concurrency", DEFAULT_CONCURRENCY)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            log.warning("Ignoring invalid walker.concurrency setting: %r", value)
            return DEFAULT_CONCURRENCY
        return value

    def _read(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Settings file %s does not hold an object, ignoring it", self.path)
            return {}
        return data

    def _write(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self.path, e)
