from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Dict, Protocol

_LOG = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String key-value storage scoped to one application."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


def _require_str(key: str, value: object) -> None:
    if not isinstance(value, str):
        raise TypeError(f"value for {key!r} must be str, got {type(value).__name__}")


@dataclass
class MemoryKeyValueStore:
    values: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        _require_str(key, value)
        self.values[key] = value


class FileKeyValueStore:
    """JSON file backed store.

    The file holds one object per application scope, so several watchface
    companions can share a data directory. Reads always go to disk so values
    written by a previous process are visible after a restart.
    """

    def __init__(self, path: Path | str, scope: str = "default") -> None:
        self._path = Path(path)
        self._scope = scope
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load_all(self) -> Dict[str, Dict[str, str]]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            _LOG.warning("options store %s is unreadable; treating as empty", self._path)
            return {}
        if not isinstance(raw, dict):
            _LOG.warning("options store %s is not a JSON object; treating as empty", self._path)
            return {}
        return {
            scope: {k: v for k, v in entries.items() if isinstance(v, str)}
            for scope, entries in raw.items()
            if isinstance(entries, dict)
        }

    def _save_all(self, data: Dict[str, Dict[str, str]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".tmp")
        with temp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True, ensure_ascii=False)
            handle.write("\n")
        os.replace(temp_path, self._path)

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._load_all().get(self._scope, {}).get(key)

    def set(self, key: str, value: str) -> None:
        _require_str(key, value)
        with self._lock:
            data = self._load_all()
            data.setdefault(self._scope, {})[key] = value
            self._save_all(data)


__all__ = ["FileKeyValueStore", "KeyValueStore", "MemoryKeyValueStore"]
